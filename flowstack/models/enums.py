"""Enumeration types for the proposal engine."""

from enum import Enum


class ErrorCode(str, Enum):
    """Machine-readable error codes, local or reported by the provider."""
    SERVER_MISCONFIG = "server_misconfig"
    FETCH_FAILED = "fetch_failed"
    RATE_LIMIT_EXCEEDED = "rate_limit_exceeded"


class Decision(str, Enum):
    """Fallback decision taken after each model attempt."""
    ACCEPT = "accept"
    RETRY = "retry"
    FAIL = "fail"


class SectionName(str, Enum):
    """Proposal sections that can be extracted and rewritten independently."""
    EXECUTIVE_SUMMARY = "Executive Summary"
    SOLUTION_ARCHITECTURE = "Solution Architecture"
