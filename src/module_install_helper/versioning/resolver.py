"""Pick the release of a module that satisfies a version requirement."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterable, List, Sequence, Union

from ..common.logging_utils import extra_context, is_debug_enabled
from ..errors import NoMatchingVersion
from .models import Release, VersionConstraint, coerce_version
from .parser import parse_constraints

if TYPE_CHECKING:  # pragma: no cover
    from ..registry.forge import ForgeClient

logger = logging.getLogger(__name__)

ConstraintLike = Union[VersionConstraint, str]
ReleaseLike = Union[Release, str]


def _flatten(constraints: Iterable[ConstraintLike]) -> List[VersionConstraint]:
    flat: List[VersionConstraint] = []
    for item in constraints:
        if isinstance(item, VersionConstraint):
            flat.append(item)
        else:
            flat.extend(parse_constraints(item))
    return flat


def _version_of(release: ReleaseLike) -> str:
    return release.version if isinstance(release, Release) else str(release)


def satisfies_all(version: str, constraints: Sequence[VersionConstraint]) -> bool:
    """Return True when ``version`` meets every constraint (empty means any)."""
    return all(c.matches(version) for c in constraints)


def select_version(
    constraints: Iterable[ConstraintLike],
    candidate_releases: Iterable[ReleaseLike],
    module_name: str = "",
) -> str:
    """Return the newest candidate meeting all constraints.

    Candidates are walked in the order given and the constraints are ANDed
    per candidate, stopping at the first one that fails. A later match
    replaces the current pick only when it is strictly newer, so among equal
    versions the first wins. The result does not depend on feed order; on a
    newest-first registry feed it is the first hit. Constraints may be
    VersionConstraint objects or requirement strings, which are parsed.

    Raises:
        NoMatchingVersion: no candidate satisfies every constraint.
    """
    flat = _flatten(constraints)
    best = None
    best_parsed = None
    for release in candidate_releases:
        version = _version_of(release)
        if not satisfies_all(version, flat):
            continue
        parsed = coerce_version(version)
        if parsed is None:
            continue
        if best_parsed is None or parsed > best_parsed:
            best, best_parsed = version, parsed

    if best is None:
        raise NoMatchingVersion(module_name, " ".join(str(c) for c in flat))

    if is_debug_enabled(logger):
        logger.debug(
            "Selected %s %s", module_name or "<module>", best,
            extra=extra_context(
                event="version_selected",
                component="resolver",
                module=module_name or None,
                version=best,
            ),
        )
    return best


def module_version_from_requirement(
    registry: "ForgeClient", module_name: str, requirement: str
) -> str:
    """Query the registry for ``module_name`` and resolve ``requirement``.

    Raises:
        InvalidConstraintSyntax: malformed requirement.
        RegistryQueryFailed: the registry lookup failed.
        NoMatchingVersion: nothing published satisfies the requirement.
    """
    constraints = parse_constraints(requirement)
    releases = registry.query_registry(module_name)
    try:
        return select_version(constraints, releases, module_name=module_name)
    except NoMatchingVersion:
        raise NoMatchingVersion(module_name, requirement) from None
