"""Standard scale for measuring the severity of a vulnerability."""

from __future__ import annotations

import enum

__all__ = [
    "Severity",
    "SeverityParseError",
    "SEVERITIES",
    "parse_severity",
    "is_valid_severity",
]


class SeverityParseError(ValueError):
    """Raised when a severity cannot be parsed from a string."""

    def __init__(self, message: str = "failed to parse Severity from input") -> None:
        super().__init__(message)


class Severity(str, enum.Enum):
    """Severity levels, declared from lowest to highest."""

    # Not yet assigned a priority, or a priority that was not recognised.
    UNKNOWN = "Unknown"
    # Only theoretical in nature or does no real damage.
    NEGLIGIBLE = "Negligible"
    # Hard to exploit, small install base, or very little damage.
    LOW = "Low"
    # A real problem, exploitable for many people.
    MEDIUM = "Medium"
    # Exploitable for many people in a default installation.
    HIGH = "High"
    # Exploitable for nearly everyone in a default installation.
    CRITICAL = "Critical"
    # A critical problem manually highlighted for immediate attention.
    DEFCON1 = "Defcon1"

    def __str__(self) -> str:
        return self.value

    def compare(self, other: object) -> int:
        """Return the rank difference between this severity and ``other``.

        Zero means equal, a negative number means this one is lower and a
        positive number means it is higher. Unknown values rank above all
        known severities.
        """
        return _rank(self) - _rank(other)


SEVERITIES: tuple[Severity, ...] = tuple(Severity)
"""All known severities, ordered from lowest to highest."""


def _rank(value: object) -> int:
    for index, severity in enumerate(SEVERITIES):
        if value == severity:
            return index
    return len(SEVERITIES)


def parse_severity(text: str) -> Severity:
    """Parse ``text`` into a Severity, ignoring case."""
    folded = text.casefold()
    for severity in SEVERITIES:
        if severity.value.casefold() == folded:
            return severity
    raise SeverityParseError()


def is_valid_severity(value: object) -> bool:
    """Tell whether ``value`` exactly names a known severity."""
    return isinstance(value, str) and any(value == s.value for s in SEVERITIES)