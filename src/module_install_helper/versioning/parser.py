"""Token parsing for version requirement strings."""

import re
from typing import List, Optional

from ..errors import InvalidConstraintSyntax
from .models import ConstraintOperator, VersionConstraint

# Two-character operators first so "<=" is not read as "<" followed by "=".
_OPERATOR_RE = re.compile(r"<=|>=|=|<|>")
_VERSION_RE = re.compile(r"\d+(?:\.\d+)*")


def parse_constraints(text: Optional[str]) -> List[VersionConstraint]:
    """Parse a requirement such as ``">= 4.13.1 <= 4.14.0"`` into constraints.

    Operators and versions are scanned independently and paired by position,
    so ``">= 1 < 2"`` gives ``[>= 1, < 2]``. A string without operators is an
    empty requirement.

    Raises:
        InvalidConstraintSyntax: operator and version counts differ.
    """
    if text is None or not text.strip():
        return []

    operators = _OPERATOR_RE.findall(text)
    versions = _VERSION_RE.findall(text)

    if not operators:
        return []
    if len(operators) != len(versions):
        raise InvalidConstraintSyntax(text)

    return [
        VersionConstraint(ConstraintOperator(op), ver)
        for op, ver in zip(operators, versions)
    ]
