"""Install the module under test and its dependencies on test hosts.

Typical acceptance-test setup::

    config = HelperConfig.from_env(module_source_dir=get_module_source_directory())
    helper = ModuleInstallHelper(framework, config)
    helper.install_module(hosts)
    helper.install_module_dependencies(hosts)
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from .config import HelperConfig
from .errors import UnsupportedDependencyType
from .framework import HostFramework
from .hosts import as_host_list, hosts_to_install_module_on
from .metadata import ModuleMetadata, forge_module_name, read_module_metadata
from .planning.models import FactGatedDependency, MetadataDependency
from .planning.planner import DependencyLike, plan_installs
from .registry.forge import ForgeClient
from .versioning.resolver import module_version_from_requirement

logger = logging.getLogger(__name__)


class ModuleInstallHelper:
    """Glue between the resolver, the planner and the host framework."""

    def __init__(
        self,
        framework: HostFramework,
        config: Optional[HelperConfig] = None,
        registry: Optional[ForgeClient] = None,
    ):
        self.framework = framework
        self.config = config or HelperConfig.from_env()
        self.registry = registry or ForgeClient(self.config)
        self._metadata: Optional[ModuleMetadata] = None
        self._installers: Dict[str, Callable[[Any, FactGatedDependency], Any]] = {
            "package": self._install_package,
        }

    # Host selection

    def hosts_to_install_module_on(self, hosts: Any) -> List[Any]:
        return hosts_to_install_module_on(hosts)

    # Metadata

    def module_metadata(self) -> ModuleMetadata:
        """Return metadata.json of the module under test, read once."""
        if self._metadata is None:
            self._metadata = read_module_metadata(self.config.module_source_dir)
        return self._metadata

    def module_name_from_metadata(self) -> str:
        return self.module_metadata().short_name

    def module_version_from_requirement(self, module_name: str, requirement: str) -> str:
        """Most recent release of ``module_name`` satisfying ``requirement``."""
        return module_version_from_requirement(self.registry, module_name, requirement)

    def module_dependencies_from_metadata(self) -> List[MetadataDependency]:
        """Dependencies of the module under test with their versions resolved."""
        dependencies = []
        for declared in self.module_metadata().dependencies:
            module_name = forge_module_name(declared.name)
            version = None
            if declared.version_requirement is not None:
                version = self.module_version_from_requirement(
                    module_name, declared.version_requirement
                )
            dependencies.append(MetadataDependency(module_name, version))
        return dependencies

    # Module under test

    def install_module_on(self, hosts: Any, **opts: Any) -> Any:
        """Copy the module under test to ``hosts``.

        Returns the framework result for a single host, or a list of results.
        """
        host_list = as_host_list(hosts)
        copy_opts = {
            "source": self.config.module_source_dir,
            "module_name": self.module_name_from_metadata(),
        }
        copy_opts.update(opts)
        results = []
        for host in host_list:
            logger.info("Copying module %s to host", copy_opts["module_name"])
            results.append(self.framework.copy_module_to(host, **copy_opts))
        return results[0] if len(results) == 1 else results

    def install_module(self, hosts: Any, **opts: Any) -> Any:
        return self.install_module_on(self.hosts_to_install_module_on(hosts), **opts)

    # Forge dependencies

    def install_module_dependencies_on(
        self, hosts: Any, dependencies: Optional[Sequence[MetadataDependency]] = None
    ) -> None:
        """Install forge dependencies on every host, host by host."""
        if dependencies is None:
            dependencies = self.module_dependencies_from_metadata()
        for host in as_host_list(hosts):
            for dep in dependencies:
                self._install_forge_module(host, dep)

    def install_module_dependencies(
        self, hosts: Any, dependencies: Optional[Sequence[MetadataDependency]] = None
    ) -> None:
        self.install_module_dependencies_on(self.hosts_to_install_module_on(hosts), dependencies)

    def install_module_from_forge_on(self, hosts: Any, module_name: str, requirement: str) -> None:
        """Install one forge module at the newest version meeting ``requirement``."""
        module_name = forge_module_name(module_name)
        dependency = MetadataDependency(
            module_name, self.module_version_from_requirement(module_name, requirement)
        )
        self.install_module_dependencies_on(hosts, [dependency])

    def install_module_from_forge(self, hosts: Any, module_name: str, requirement: str) -> None:
        self.install_module_from_forge_on(
            self.hosts_to_install_module_on(hosts), module_name, requirement
        )

    def _install_forge_module(self, host: Any, dep: MetadataDependency) -> Any:
        logger.info("Installing %s %s", dep.module_name, dep.version or "(latest)")
        if not self.config.stub_forge:
            return self.framework.install_module_via_pmt_on(host, dep.as_dict())
        with self.framework.forge_stubbed_on(host, self.config.forge_host):
            return self.framework.install_module_via_pmt_on(host, dep.as_dict())

    # Fact-gated dependencies

    def install_dependencies_on(
        self, hosts: Any, dependencies: Iterable[DependencyLike]
    ) -> List[Tuple[Any, FactGatedDependency]]:
        """Install each dependency on the hosts whose facts match it.

        Every dependency type is checked before anything is installed. A
        failure on one (host, dependency) pair leaves earlier installs in
        place.

        Returns:
            The executed plan as (host, dependency) pairs.

        Raises:
            UnsupportedDependencyType: no installer for a dependency's type.
            InvalidDependency: a dependency is malformed.
        """
        deps = list(dependencies)
        for dep in deps:
            if _dependency_type(dep) is not None:
                self._installer_for(dep)
        plan = plan_installs(as_host_list(hosts), deps, self.framework.lookup_fact)
        for host, dep in plan:
            self._installer_for(dep)(host, dep)
        return plan

    def _installer_for(self, dep: DependencyLike) -> Callable[[Any, FactGatedDependency], Any]:
        dep_type = _dependency_type(dep)
        installer = self._installers.get(dep_type) if isinstance(dep_type, str) else None
        if installer is None:
            raise UnsupportedDependencyType(dep_type, dep)
        return installer

    def _install_package(self, host: Any, dep: FactGatedDependency) -> Any:
        logger.info("Installing package %s", dep.name)
        return self.framework.install_package(host, dep.name)


def _dependency_type(dep: Any) -> Any:
    if isinstance(dep, FactGatedDependency):
        return dep.type
    if isinstance(dep, Mapping):
        return dep.get("type")
    return None
