"""Locate the module under test and read its metadata.json."""

from __future__ import annotations

import inspect
import json
import logging
import os
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Optional, Tuple

from .constants import Constants
from .errors import InvalidMetadata, MetadataNotFound, ModuleInstallHelperError, ModuleSourceNotFound

logger = logging.getLogger(__name__)

_CALLER_RE = re.compile(Constants.CALLER_PATTERN, re.IGNORECASE)
_MODULE_NAME_RE = re.compile(r"^([^-/]+)[-/](.+)$")


@dataclass(frozen=True)
class DeclaredDependency:
    """A dependency exactly as metadata.json declares it."""
    name: str
    version_requirement: Optional[str] = None


@dataclass(frozen=True)
class ModuleMetadata:
    """The parts of metadata.json the installer uses."""
    name: str
    dependencies: Tuple[DeclaredDependency, ...] = ()
    raw: Dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @property
    def short_name(self) -> str:
        """Module name without its author prefix."""
        return module_short_name(self.name)

    @classmethod
    def from_dict(cls, data: Any, path: Optional[str] = None) -> "ModuleMetadata":
        """Build metadata from a parsed metadata.json document.

        Raises:
            InvalidMetadata: the document or one of its dependencies is malformed.
        """
        if not isinstance(data, dict):
            raise InvalidMetadata(path, f"expected a JSON object, got {type(data).__name__}")
        name = data.get("name", "")
        if not isinstance(name, str):
            raise InvalidMetadata(path, "'name' must be a string")
        entries = data.get("dependencies") or []
        if not isinstance(entries, list):
            raise InvalidMetadata(path, "'dependencies' must be a list")

        deps = []
        for entry in entries:
            if not isinstance(entry, dict) or not isinstance(entry.get("name"), str):
                raise InvalidMetadata(path, "dependency without a 'name'", entry)
            requirement = entry.get("version_requirement")
            if requirement is not None and not isinstance(requirement, str):
                raise InvalidMetadata(path, "'version_requirement' must be a string", entry)
            deps.append(DeclaredDependency(name=entry["name"], version_requirement=requirement))
        return cls(name=name, dependencies=tuple(deps), raw=data)


def module_short_name(name: str) -> str:
    """Strip the author from a forge name: ``puppetlabs-vcsrepo`` -> ``vcsrepo``.

    Raises:
        ModuleInstallHelperError: ``name`` has no author prefix.
    """
    match = _MODULE_NAME_RE.match(name or "")
    if not match:
        raise ModuleInstallHelperError(f"Error getting module name from '{name}'")
    return match.group(2)


def forge_module_name(name: str) -> str:
    """Return the forge form of a module name: ``puppetlabs/stdlib`` -> ``puppetlabs-stdlib``."""
    return name.replace("/", "-", 1)


def find_module_root(start_path: str, metadata_file: str = Constants.METADATA_FILE) -> Optional[str]:
    """Walk up from ``start_path`` to the first directory holding ``metadata_file``.

    Returns None when the filesystem root is reached without a match.
    """
    search_dir = os.path.abspath(start_path)
    while True:
        if os.path.exists(os.path.join(search_dir, metadata_file)):
            return search_dir
        parent = os.path.dirname(search_dir)
        if parent == search_dir:
            return None
        search_dir = parent


def _caller_path(entry: str) -> str:
    # Ruby style frames look like "/path/file_spec.rb:12:in `block'".
    return entry.split(":", 1)[0]


def get_module_source_directory(call_stack: Optional[Iterable[str]] = None) -> Optional[str]:
    """Find the module root above the spec file found in ``call_stack``.

    Args:
        call_stack: File paths (optionally with ``:line`` suffixes), innermost
            first. Defaults to the current Python call stack.

    Raises:
        ModuleSourceNotFound: no entry names a spec or test file.
    """
    if call_stack is None:
        call_stack = [frame.filename for frame in inspect.stack()]
    entries = list(call_stack)

    for entry in entries:
        path = _caller_path(entry)
        if _CALLER_RE.search(os.path.basename(path)):
            root = find_module_root(os.path.dirname(path))
            logger.debug("Module source directory for %s: %s", path, root)
            return root

    raise ModuleSourceNotFound(entries)


def read_module_metadata(root_path: Optional[str]) -> ModuleMetadata:
    """Parse ``metadata.json`` from ``root_path``.

    Raises:
        MetadataNotFound: the file does not exist.
        InvalidMetadata: the file is not valid JSON or has a malformed entry.
    """
    if not root_path:
        raise MetadataNotFound(root_path)
    metadata_path = os.path.join(root_path, Constants.METADATA_FILE)
    if not os.path.exists(metadata_path):
        raise MetadataNotFound(root_path)
    with open(metadata_path, "r", encoding="utf-8") as fh:
        try:
            data = json.load(fh)
        except json.JSONDecodeError as e:
            raise InvalidMetadata(metadata_path, f"invalid JSON ({e})") from e
    return ModuleMetadata.from_dict(data, path=metadata_path)
