"""Decide which fact-gated dependencies apply to which hosts."""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, List, Mapping, Tuple, Union

from ..common.logging_utils import extra_context, is_debug_enabled
from ..constants import FactOperator
from ..errors import InvalidDependency, InvalidFactConstraint
from .models import FactConstraint, FactGatedDependency
from .validation import validate_dependency, validate_fact_constraint

logger = logging.getLogger(__name__)

FactLookup = Callable[[Any, str], Any]
DependencyLike = Union[FactGatedDependency, Mapping[str, Any]]
FactConstraintLike = Union[FactConstraint, Mapping[str, Any]]


def to_fact_constraint(fc: FactConstraintLike) -> FactConstraint:
    """Return ``fc`` as a validated FactConstraint.

    Raises:
        InvalidFactConstraint: ``fc`` fails validation.
    """
    if isinstance(fc, FactConstraint):
        if not validate_fact_constraint(fc):
            raise InvalidFactConstraint(fc)
        # Re-read so an operator given as a plain string becomes a FactOperator.
        return FactConstraint.from_mapping(fc.as_mapping())
    return FactConstraint.from_mapping(fc)


def to_dependency(dep: DependencyLike) -> FactGatedDependency:
    """Return ``dep`` as a validated FactGatedDependency.

    Raises:
        InvalidDependency: ``dep`` fails validation.
    """
    if isinstance(dep, FactGatedDependency):
        if not validate_dependency(dep):
            raise InvalidDependency(dep)
        return FactGatedDependency.from_mapping(dep.as_mapping())
    return FactGatedDependency.from_mapping(dep)


def meets_fact_constraint(host: Any, fc: FactConstraintLike, lookup_fact: FactLookup) -> bool:
    """Evaluate one fact constraint against ``host``.

    The fact is read through ``lookup_fact`` on every call; nothing is cached.

    Raises:
        InvalidFactConstraint: ``fc`` is malformed.
    """
    constraint = to_fact_constraint(fc)
    actual = lookup_fact(host, constraint.name)
    op = constraint.operator

    if op is FactOperator.EQUAL:
        result = actual == constraint.value
    elif op is FactOperator.NOT_EQUAL:
        result = actual != constraint.value
    elif op is FactOperator.IN:
        result = actual in constraint.value
    elif op is FactOperator.NOT_IN:
        result = actual not in constraint.value
    else:
        result = False

    if is_debug_enabled(logger):
        logger.debug(
            "Fact %s=%r %s %r -> %s", constraint.name, actual, op.value, constraint.value, result,
            extra=extra_context(event="fact_check", component="planner", fact=constraint.name),
        )
    return result


def meets_dependency(host: Any, dep: DependencyLike, lookup_fact: FactLookup) -> bool:
    """Return True when ``dep`` applies to ``host``.

    A dependency without facts applies everywhere. Otherwise any one
    satisfied fact constraint is enough.

    Raises:
        InvalidDependency: ``dep`` is malformed.
    """
    dependency = to_dependency(dep)
    if dependency.facts is None:
        return True
    return any(meets_fact_constraint(host, fc, lookup_fact) for fc in dependency.facts)


def plan_installs(
    hosts: Iterable[Any],
    dependencies: Iterable[DependencyLike],
    lookup_fact: FactLookup,
) -> List[Tuple[Any, FactGatedDependency]]:
    """Return the (host, dependency) pairs to install, host-major order.

    Raises:
        InvalidDependency: a dependency is malformed.
    """
    deps = [to_dependency(d) for d in dependencies]
    plan = []
    for host in hosts:
        for dep in deps:
            if meets_dependency(host, dep, lookup_fact):
                plan.append((host, dep))
            else:
                logger.debug("Skipping %s: no fact constraint matched", dep.name)
    return plan
