"""Fact-gated dependency planning."""

from .models import FactConstraint, FactGatedDependency, MetadataDependency
from .planner import meets_dependency, meets_fact_constraint, plan_installs
from .validation import validate_dependency, validate_fact_constraint

__all__ = [
    "FactConstraint",
    "FactGatedDependency",
    "MetadataDependency",
    "validate_dependency",
    "validate_fact_constraint",
    "meets_fact_constraint",
    "meets_dependency",
    "plan_installs",
]
