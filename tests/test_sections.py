"""Tests for section extraction and merge."""

from flowstack.models import SectionName
from flowstack.services.sections import extract_sections, merge_sections


class TestExtractSections:
    """Heading scan over the fixed section set."""

    def test_extracts_both_sections(self, pass1_markdown):
        sections = extract_sections(pass1_markdown)

        assert set(sections) == {SectionName.EXECUTIVE_SUMMARY, SectionName.SOLUTION_ARCHITECTURE}
        assert sections[SectionName.EXECUTIVE_SUMMARY].startswith("## Executive Summary\n")
        assert "Current Bottleneck: Slow follow-up" in sections[SectionName.EXECUTIVE_SUMMARY]
        assert "## Diagnosis" not in sections[SectionName.EXECUTIVE_SUMMARY]
        assert sections[SectionName.SOLUTION_ARCHITECTURE].startswith(
            "## SOLUTION ARCHITECTURE: “FlowStackOS 3-Module System”\n"
        )
        assert "## Next Steps" not in sections[SectionName.SOLUTION_ARCHITECTURE]

    def test_heading_match_is_case_insensitive(self):
        doc = "## executive summary\nLowercase heading body.\n\n## Solution architecture\n- one\n"

        sections = extract_sections(doc)

        assert sections[SectionName.EXECUTIVE_SUMMARY] == "## executive summary\nLowercase heading body.\n"
        assert sections[SectionName.SOLUTION_ARCHITECTURE] == "## Solution architecture\n- one\n"

    def test_last_section_runs_to_end_of_document(self):
        doc = "## Diagnosis\n- slow\n\n## Solution Architecture (v2)\n- module A\n- module B"

        sections = extract_sections(doc)

        assert sections == {
            SectionName.SOLUTION_ARCHITECTURE: "## Solution Architecture (v2)\n- module A\n- module B"
        }

    def test_missing_sections_are_absent(self):
        assert extract_sections("## Diagnosis\n- nothing to polish\n") == {}

    def test_executive_summary_label_must_be_exact(self):
        doc = "## Executive Summary of Findings\nbody\n"

        assert SectionName.EXECUTIVE_SUMMARY not in extract_sections(doc)

    def test_empty_section_stops_at_next_heading(self):
        doc = "## Executive Summary\n\n## Diagnosis\n- slow follow-up\n\n## Next Steps\n- call"

        sections = extract_sections(doc)

        assert sections[SectionName.EXECUTIVE_SUMMARY] == "## Executive Summary\n"

    def test_sub_heading_is_not_a_section(self):
        doc = "## Diagnosis\n### Executive Summary\n- nested note\n"

        assert extract_sections(doc) == {}


class TestMergeSections:
    """Textual substitution of rewritten sections."""

    def test_replaces_both_sections(self, pass1_markdown, polished_sections):
        merged = merge_sections(pass1_markdown, polished_sections)

        assert merged == (
            "## Executive Summary\n"
            "Acme Growth is leaking $40,000 every month ($480,000 a year) because slow "
            "follow-up lets warm leads go cold.\n"
            "\n"
            "## Diagnosis\n"
            "- Leads wait more than 24 hours for first contact.\n"
            "\n"
            "## Revenue at Risk\n"
            "- $480,000 per year.\n"
            "\n"
            "## SOLUTION ARCHITECTURE: “FlowStackOS 3-Module System”\n"
            "- Module 1: route every lead in under a minute.\n"
            "- Module 2: book calls automatically.\n"
            "- Module 3: keep clients engaged after the sale.\n"
            "\n"
            "## Next Steps\n"
            "- Book the installation call."
        )

    def test_merge_with_itself_is_identity(self, pass1_markdown):
        assert merge_sections(pass1_markdown, pass1_markdown) == pass1_markdown.strip()

    def test_extract_then_merge_round_trip(self, pass1_markdown):
        sections = extract_sections(pass1_markdown)
        candidate = "\n\n".join(sections.values())

        assert merge_sections(pass1_markdown, candidate) == pass1_markdown.strip()

    def test_untouched_sections_are_byte_identical(self):
        base = (
            "## Executive Summary\nOld summary.\n\n"
            "## Revenue at Risk\n- $12,345.67 per month\n  - indented detail\n\n"
            "## Next Steps\n- Call us."
        )
        candidate = "## Executive Summary\nNew summary.\n"

        merged = merge_sections(base, candidate)

        assert merged.startswith("## Executive Summary\nNew summary.\n\n## Revenue at Risk")
        assert "## Revenue at Risk\n- $12,345.67 per month\n  - indented detail\n\n" in merged
        assert merged.endswith("## Next Steps\n- Call us.")

    def test_section_missing_from_base_is_not_added(self):
        base = "## Executive Summary\nOld summary.\n\n## Next Steps\n- Call us."
        candidate = "## Solution Architecture\n- brand new module\n"

        assert merge_sections(base, candidate) == base

    def test_replacement_text_is_literal(self):
        base = "## Executive Summary\nOld.\n\n## Next Steps\n- Call."
        candidate = "## Executive Summary\nSave $1 and \\1 per lead; $& stays.\n"

        merged = merge_sections(base, candidate)

        assert "Save $1 and \\1 per lead; $& stays." in merged

    def test_empty_section_keeps_following_heading(self):
        base = "## Executive Summary\n\n## Diagnosis\n- slow follow-up\n\n## Next Steps\n- call"
        candidate = "## Executive Summary\nA rewritten summary.\n"

        assert merge_sections(base, candidate) == (
            "## Executive Summary\nA rewritten summary.\n\n"
            "## Diagnosis\n- slow follow-up\n\n"
            "## Next Steps\n- call"
        )

    def test_sub_heading_is_left_alone(self):
        base = (
            "## Diagnosis\n### Executive Summary\n- nested note\n\n"
            "## Executive Summary\nOld.\n\n"
            "## Next Steps\n- Call."
        )
        candidate = "## Executive Summary\nNew.\n"

        assert merge_sections(base, candidate) == (
            "## Diagnosis\n### Executive Summary\n- nested note\n\n"
            "## Executive Summary\nNew.\n\n"
            "## Next Steps\n- Call."
        )

    def test_result_is_trimmed(self):
        base = "\n\n## Executive Summary\nOld.\n\n"
        candidate = "## Executive Summary\nNew text.\n"

        assert merge_sections(base, candidate) == "## Executive Summary\nNew text."
