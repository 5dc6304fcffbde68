"""Data models for version constraints and registry releases."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

import semantic_version


class ConstraintOperator(Enum):
    """Comparison operators accepted in a version requirement."""
    EQ = "="
    LT = "<"
    GT = ">"
    LE = "<="
    GE = ">="


def coerce_version(version: str) -> Optional[semantic_version.Version]:
    """Parse a possibly partial version ("1", "1.4") into a full Version.

    Returns None when the string is not a version at all.
    """
    try:
        return semantic_version.Version.coerce(version.strip())
    except (ValueError, AttributeError):
        return None


@dataclass(frozen=True)
class VersionConstraint:
    """One ``<operator> <version>`` pair of a requirement string."""
    operator: ConstraintOperator
    version: str

    def matches(self, candidate: str) -> bool:
        """Return True when ``candidate`` satisfies this constraint."""
        wanted = coerce_version(self.version)
        actual = coerce_version(candidate)
        if wanted is None or actual is None:
            return False
        op = self.operator
        if op is ConstraintOperator.EQ:
            return actual == wanted
        if op is ConstraintOperator.LT:
            return actual < wanted
        if op is ConstraintOperator.GT:
            return actual > wanted
        if op is ConstraintOperator.LE:
            return actual <= wanted
        if op is ConstraintOperator.GE:
            return actual >= wanted
        return False

    def __str__(self) -> str:
        return f"{self.operator.value} {self.version}"


@dataclass(frozen=True)
class Release:
    """A published release of a module as listed by the registry."""
    version: str
    slug: Optional[str] = None
    file_uri: Optional[str] = None
