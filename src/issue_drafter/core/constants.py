# Tracker priority scale. The analyzer only ever emits URGENT..LOW.
PRIORITY_URGENT = 0
PRIORITY_HIGH = 1
PRIORITY_MEDIUM = 2
PRIORITY_LOW = 3
NO_PRIORITY = 4

DEFAULT_PRIORITY = PRIORITY_MEDIUM
DRAFT_PRIORITIES = frozenset({PRIORITY_URGENT, PRIORITY_HIGH, PRIORITY_MEDIUM, PRIORITY_LOW})

PRIORITY_LABELS = {
    PRIORITY_URGENT: "Urgent",
    PRIORITY_HIGH: "High",
    PRIORITY_MEDIUM: "Medium",
    PRIORITY_LOW: "Low",
    NO_PRIORITY: "No Priority",
}

# Schema-mode priority enum -> tracker priority.
PRIORITY_CODES = {
    "P0": PRIORITY_URGENT,
    "P1": PRIORITY_HIGH,
    "P2": PRIORITY_MEDIUM,
    "P3": PRIORITY_LOW,
}

DEFAULT_TAGS = ("needs-triage",)
REVIEW_TAGS = ("needs-review",)

UNTITLED_ISSUE = "Untitled Issue"
MISSING_DESCRIPTION = "No description provided"

DEFAULT_MODEL = "gemini-2.0-flash"
