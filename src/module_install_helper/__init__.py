"""Install a Puppet module under test, and its dependencies, on test hosts."""

from .config import HelperConfig
from .errors import (
    InvalidConstraintSyntax,
    InvalidDependency,
    InvalidFactConstraint,
    InvalidMetadata,
    MetadataNotFound,
    ModuleInstallHelperError,
    ModuleSourceNotFound,
    NoMatchingVersion,
    RegistryQueryFailed,
    UnsupportedDependencyType,
)
from .framework import HostFramework
from .helper import ModuleInstallHelper
from .hosts import hosts_to_install_module_on, select_hosts_by_role
from .metadata import find_module_root, get_module_source_directory, read_module_metadata
from .planning import (
    FactConstraint,
    FactGatedDependency,
    MetadataDependency,
    meets_dependency,
    meets_fact_constraint,
    plan_installs,
    validate_dependency,
    validate_fact_constraint,
)
from .registry import ForgeClient
from .versioning import Release, VersionConstraint, parse_constraints, select_version

__all__ = [
    "HelperConfig",
    "HostFramework",
    "ModuleInstallHelper",
    "ForgeClient",
    "Release",
    "VersionConstraint",
    "parse_constraints",
    "select_version",
    "FactConstraint",
    "FactGatedDependency",
    "MetadataDependency",
    "validate_dependency",
    "validate_fact_constraint",
    "meets_fact_constraint",
    "meets_dependency",
    "plan_installs",
    "hosts_to_install_module_on",
    "select_hosts_by_role",
    "find_module_root",
    "get_module_source_directory",
    "read_module_metadata",
    "ModuleInstallHelperError",
    "InvalidConstraintSyntax",
    "NoMatchingVersion",
    "RegistryQueryFailed",
    "InvalidDependency",
    "InvalidFactConstraint",
    "UnsupportedDependencyType",
    "MetadataNotFound",
    "InvalidMetadata",
    "ModuleSourceNotFound",
]
