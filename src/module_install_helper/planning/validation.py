"""Shape checks for fact-gated dependency descriptors.

These are predicates: they return False for bad input instead of raising, so
callers can filter or report invalid entries. The planner raises on invalid
input when it evaluates a descriptor.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping

from jsonschema import Draft7Validator

from ..constants import Constants, FactOperator

FACT_CONSTRAINT_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "required": ["name", "operator", "value"],
    "properties": {
        "name": {"type": "string", "minLength": 1},
        "operator": {"enum": [op.value for op in FactOperator]},
    },
    "allOf": [
        {
            "if": {"properties": {"operator": {"enum": Constants.LIST_OPERATORS}}},
            "then": {"properties": {"value": {"type": "array", "items": {"type": "string"}}}},
        },
        {
            "if": {"properties": {"operator": {"enum": Constants.SCALAR_OPERATORS}}},
            "then": {"properties": {"value": {"type": "string"}}},
        },
    ],
}

DEPENDENCY_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "required": ["name", "type"],
    "properties": {
        "name": {"type": "string", "minLength": 1},
        "type": {"enum": Constants.SUPPORTED_DEPENDENCY_TYPES},
        "facts": {"type": "array", "items": FACT_CONSTRAINT_SCHEMA},
    },
}

_fact_constraint_validator = Draft7Validator(FACT_CONSTRAINT_SCHEMA)
_dependency_validator = Draft7Validator(DEPENDENCY_SCHEMA)


def _as_mapping(obj: Any) -> Any:
    as_mapping = getattr(obj, "as_mapping", None)
    if not callable(as_mapping):
        return obj
    try:
        return as_mapping()
    except (TypeError, AttributeError, ValueError):
        return None


def _dependency_mapping(dep: Any) -> Any:
    data = _as_mapping(dep)
    if isinstance(data, Mapping) and isinstance(data.get("facts"), (list, tuple)):
        data = dict(data)
        data["facts"] = [_as_mapping(fc) for fc in data["facts"]]
    return data


def validate_fact_constraint(fc: Any) -> bool:
    """Return True when ``fc`` is a well-formed fact constraint.

    ``in``/``not_in`` take a list of strings, ``equal``/``not_equal`` a
    single string.
    """
    return _fact_constraint_validator.is_valid(_as_mapping(fc))


def validate_dependency(dep: Any) -> bool:
    """Return True when ``dep`` names a supported type and valid facts."""
    return _dependency_validator.is_valid(_dependency_mapping(dep))
