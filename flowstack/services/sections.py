"""Section extraction and merge for generated proposal Markdown.

Only the two headings rewritten by the polish pass are recognized; this is a
heading scan, not a Markdown parser.
"""

import re
from typing import Dict

from flowstack.models import SectionName

DocumentSections = Dict[SectionName, str]

# Headings are matched at line start and never run past their own line.
# A section runs from its heading up to the next "## " heading or end of text.
_SECTION_END = r".*?(?=\n##\s|\Z)"
_FLAGS = re.IGNORECASE | re.DOTALL | re.MULTILINE

SECTION_PATTERNS: Dict[SectionName, re.Pattern] = {
    SectionName.EXECUTIVE_SUMMARY: re.compile(
        r"^##[ \t]*Executive Summary[ \t]*\n" + _SECTION_END,
        _FLAGS
    ),
    SectionName.SOLUTION_ARCHITECTURE: re.compile(
        r"^##[ \t]*Solution[ \t]+Architecture[^\n]*\n" + _SECTION_END,
        _FLAGS
    ),
}


def extract_sections(markdown: str) -> DocumentSections:
    """
    Locate the recognized sections of a document.

    Args:
        markdown: Generated proposal

    Returns:
        Mapping of section name to its span (heading line and body).
        Sections not found are absent.
    """
    sections: DocumentSections = {}
    for name, pattern in SECTION_PATTERNS.items():
        match = pattern.search(markdown)
        if match:
            sections[name] = match.group(0)
    return sections


def _replace_span(document: str, pattern: re.Pattern, replacement: str) -> str:
    match = pattern.search(document)
    if not match:
        return document
    span = match.group(0)
    # Keep the whitespace that separated the old span from the next heading
    trailing = span[len(span.rstrip()):]
    return document[:match.start()] + replacement.strip() + trailing + document[match.end():]


def merge_sections(base: str, candidate: str) -> str:
    """
    Substitute the candidate's recognized sections into the base document.

    Sections the candidate lacks are left byte-identical. Substitution is
    literal text; no validation of the replaced content is done.

    Args:
        base: Original document
        candidate: Document holding rewritten sections

    Returns:
        Merged document, trimmed
    """
    merged = base
    for name, replacement in extract_sections(candidate).items():
        merged = _replace_span(merged, SECTION_PATTERNS[name], replacement)
    return merged.strip()
