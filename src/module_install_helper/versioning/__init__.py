"""Version requirement parsing and release selection."""

from .models import ConstraintOperator, Release, VersionConstraint
from .parser import parse_constraints
from .resolver import module_version_from_requirement, satisfies_all, select_version

__all__ = [
    "ConstraintOperator",
    "Release",
    "VersionConstraint",
    "parse_constraints",
    "select_version",
    "satisfies_all",
    "module_version_from_requirement",
]
