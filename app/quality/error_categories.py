"""Error category catalog used when a reviewer rejects an assignment.

Each category has a code, a description, and a severity weight.  Reviewers
submit the display string (``"<code>: <description>"``); the weight is found
by matching the code as a prefix of whatever was submitted, so free-text
suffixes after the code still score correctly.

Severity weights
----------------
10 — critical: wrong label definition, missed object, wrong region, process error
5  — major: label confusion, loose/tight box, occlusion handling
2  — minor: everything else in the catalog
0  — not a catalog category (or empty)
"""
from __future__ import annotations

from dataclasses import dataclass

WEIGHT_CRITICAL = 10
WEIGHT_MAJOR = 5
WEIGHT_MINOR = 2
WEIGHT_NONE = 0

SEVERITY_WEIGHTS: frozenset[int] = frozenset({WEIGHT_CRITICAL, WEIGHT_MAJOR, WEIGHT_MINOR, WEIGHT_NONE})


@dataclass(frozen=True, slots=True)
class ErrorCategory:
    code: str
    description: str
    weight: int

    @property
    def display(self) -> str:
        return f"{self.code}: {self.description}"

    @property
    def is_critical(self) -> bool:
        return self.weight >= WEIGHT_CRITICAL


CATALOG: tuple[ErrorCategory, ...] = (
    ErrorCategory("LU-01", "Incorrect label definition (bus labeled as car)", WEIGHT_CRITICAL),
    ErrorCategory("LU-02", "Label confusion (motorbike vs e-bike)", WEIGHT_MAJOR),
    ErrorCategory("TE-01", "Wrong region (box misses the object)", WEIGHT_CRITICAL),
    ErrorCategory("TE-02", "Box too loose (too much background)", WEIGHT_MAJOR),
    ErrorCategory("TE-03", "Box too tight (cuts off object detail)", WEIGHT_MAJOR),
    ErrorCategory("TE-04", "Occlusion handled wrong (hidden part drawn)", WEIGHT_MAJOR),
    ErrorCategory("ME-01", "Missing object (label omitted)", WEIGHT_CRITICAL),
    ErrorCategory("ME-02", "Extra label (drawn on empty space or noise)", WEIGHT_MINOR),
    ErrorCategory("PR-01", "Process error (not all images completed)", WEIGHT_CRITICAL),
    ErrorCategory("Other", "Other error", WEIGHT_MINOR),
)

_BY_DISPLAY: dict[str, ErrorCategory] = {c.display: c for c in CATALOG}


def all_display_strings() -> list[str]:
    """Return every catalog entry as its display string, in catalog order."""
    return [c.display for c in CATALOG]


def is_valid(category: str | None) -> bool:
    """Return whether *category* is exactly one of the catalog display strings."""
    return category in _BY_DISPLAY


def resolve(category: str | None) -> ErrorCategory | None:
    """Return the catalog entry whose code prefixes *category*, or ``None``."""
    if not category:
        return None
    for entry in CATALOG:
        if category.startswith(entry.code):
            return entry
    return None


def severity_weight(category: str | None) -> int:
    """Return the severity weight for *category* (0 when unrecognised or empty)."""
    entry = resolve(category)
    return entry.weight if entry is not None else WEIGHT_NONE
