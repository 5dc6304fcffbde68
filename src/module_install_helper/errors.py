"""Exceptions raised by the module install helper.

Every error keeps the offending input on the instance so callers can report
it without parsing the message.
"""

from __future__ import annotations

from typing import Any, Optional


class ModuleInstallHelperError(Exception):
    """Base class for all helper errors."""


class InvalidConstraintSyntax(ModuleInstallHelperError, ValueError):
    """Raised when operator and version tokens of a requirement do not pair up."""

    def __init__(self, requirement: str):
        self.requirement = requirement
        super().__init__(f"Invalid version requirements '{requirement}'")


class NoMatchingVersion(ModuleInstallHelperError):
    """Raised when no published release satisfies every constraint."""

    def __init__(self, module_name: str, requirement: str):
        self.module_name = module_name
        self.requirement = requirement
        super().__init__(
            f"No release version found matching '{module_name}' '{requirement}'"
        )


class RegistryQueryFailed(ModuleInstallHelperError):
    """Raised when the registry answers with an error or cannot be reached."""

    def __init__(self, url: str, body: str = "", status_code: Optional[int] = None):
        self.url = url
        self.body = body
        self.status_code = status_code
        super().__init__(f"Puppetforge API error '{url}': '{body}'")


class InvalidDependency(ModuleInstallHelperError):
    """Raised when a dependency descriptor fails validation at evaluation time."""

    def __init__(self, dependency: Any):
        self.dependency = dependency
        super().__init__(f"Invalid dependency: {dependency!r}")


class InvalidFactConstraint(ModuleInstallHelperError):
    """Raised when a fact constraint fails validation at evaluation time."""

    def __init__(self, constraint: Any):
        self.constraint = constraint
        super().__init__(f"Invalid fact constraint: {constraint!r}")


class UnsupportedDependencyType(ModuleInstallHelperError):
    """Raised when no installer exists for a dependency's declared type."""

    def __init__(self, dependency_type: Any, dependency: Any = None):
        self.dependency_type = dependency_type
        self.dependency = dependency
        super().__init__(
            f"Unsupported dependency type '{dependency_type}' for {dependency!r}"
        )


class MetadataNotFound(ModuleInstallHelperError):
    """Raised when the module descriptor is missing from the module root."""

    def __init__(self, directory: Any):
        self.directory = directory
        super().__init__(f"Error loading metadata.json file from {directory}")


class InvalidMetadata(ModuleInstallHelperError):
    """Raised when metadata.json exists but cannot be used."""

    def __init__(self, path: Optional[str], reason: str, entry: Any = None):
        self.path = path
        self.reason = reason
        self.entry = entry
        message = f"Invalid metadata.json file {path}: {reason}"
        if entry is not None:
            message += f" in entry {entry!r}"
        super().__init__(message)


class ModuleSourceNotFound(ModuleInstallHelperError):
    """Raised when no spec file can be found in a call stack."""

    def __init__(self, call_stack: Any):
        self.call_stack = call_stack
        super().__init__("Error finding module source directory")
