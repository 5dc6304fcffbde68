"""Dependency descriptors handled by the installer.

Two shapes exist: dependencies read from a module's metadata.json, installed
from the forge with an optional pinned version, and fact-gated dependencies
installed only on hosts whose facts match.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from ..constants import Constants, FactOperator
from ..errors import InvalidDependency, InvalidFactConstraint
from . import validation

FactValue = Union[str, Tuple[str, ...]]


@dataclass(frozen=True)
class MetadataDependency:
    """A module dependency taken from metadata.json."""
    module_name: str
    version: Optional[str] = None

    def as_dict(self) -> Dict[str, str]:
        """Return the keyword form the forge module installer expects."""
        out = {"module_name": self.module_name}
        if self.version is not None:
            out["version"] = self.version
        return out


@dataclass(frozen=True)
class FactConstraint:
    """A predicate on one host fact."""
    name: str
    operator: FactOperator
    value: FactValue

    def as_mapping(self) -> Dict[str, Any]:
        value = list(self.value) if isinstance(self.value, tuple) else self.value
        operator = self.operator.value if isinstance(self.operator, FactOperator) else self.operator
        return {"name": self.name, "operator": operator, "value": value}

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "FactConstraint":
        """Build a constraint from raw input.

        Raises:
            InvalidFactConstraint: ``data`` fails validation.
        """
        if not validation.validate_fact_constraint(data):
            raise InvalidFactConstraint(data)
        value = data["value"]
        if data["operator"] in Constants.LIST_OPERATORS:
            value = tuple(value)
        return cls(data["name"], FactOperator(data["operator"]), value)


@dataclass(frozen=True)
class FactGatedDependency:
    """A dependency installed on hosts matching any of its fact constraints.

    ``facts`` is None when the descriptor carries no ``facts`` key, which
    makes the dependency apply to every host.
    """
    name: str
    type: str = "package"
    facts: Optional[Tuple[FactConstraint, ...]] = None

    def as_mapping(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"name": self.name, "type": self.type}
        if isinstance(self.facts, (list, tuple)):
            out["facts"] = [fc.as_mapping() if isinstance(fc, FactConstraint) else fc for fc in self.facts]
        elif self.facts is not None:
            out["facts"] = self.facts
        return out

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "FactGatedDependency":
        """Build a dependency from raw input.

        Raises:
            InvalidDependency: ``data`` fails validation.
        """
        if not validation.validate_dependency(data):
            raise InvalidDependency(data)
        facts = None
        if "facts" in data:
            facts = tuple(
                FactConstraint.from_mapping(fc.as_mapping() if isinstance(fc, FactConstraint) else fc)
                for fc in data["facts"]
            )
        return cls(data["name"], data["type"], facts)
