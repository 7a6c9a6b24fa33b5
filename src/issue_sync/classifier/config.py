"""Classifier rule tables.

All rule settings at the top for easy modification. The label to issue type
table is NOT here: it lives in the external mapping file (label-mapping.json)
so teams can change it without a release.
"""

from ..models import Priority

__all__ = [
    "FALLBACK_ISSUE_TYPE",
    "HIGH_PRIORITY_KEYWORDS",
    "PLATFORM_AREAS",
    "PRIORITY_BODY_RULES",
]

# Used only when the mapping file cannot be loaded. A loaded file with no
# matching label uses its own defaultIssueType instead.
FALLBACK_ISSUE_TYPE = "Task"

# =============================================================================
# PRIORITY RULES
# =============================================================================
# Phrases come from the "Urgency / Impact" dropdown of the bug report
# template. Evaluated top to bottom against the lowercased body; first match
# wins.
PRIORITY_BODY_RULES: list[tuple[Priority, tuple[str, ...]]] = [
    (Priority.HIGHEST, ("high - production system", "production down")),
    (Priority.MEDIUM, ("medium - a non-critical feature",)),
    (Priority.LOW, ("low - minor issue", "cosmetic")),
]

# Checked against title and body after the template phrases
HIGH_PRIORITY_KEYWORDS: tuple[str, ...] = ("urgent", "critical")

# =============================================================================
# COMPONENTS
# =============================================================================
# Answers of the "Which part of the platform is affected?" dropdown. Issue
# forms render the answer on its own line, which is the only form detected.
PLATFORM_AREAS: tuple[str, ...] = ("REELS", "ALPHA", "TRINITY", "AI HUB")
