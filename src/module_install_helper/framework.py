"""Contract the host test framework implements for the installer."""

from __future__ import annotations

import contextlib
from abc import ABC, abstractmethod
from typing import Any, ContextManager, Dict


class HostFramework(ABC):
    """Side-effecting operations on test hosts.

    The installer never inspects hosts itself; every read or write goes
    through one of these methods. None of them are deduplicated by the
    caller, so repeated installs reach the framework repeatedly.
    """

    @abstractmethod
    def lookup_fact(self, host: Any, fact_name: str) -> Any:
        """Return the current value of ``fact_name`` on ``host``."""

    @abstractmethod
    def install_package(self, host: Any, package_name: str) -> Any:
        """Install an operating-system package on ``host``."""

    @abstractmethod
    def install_module_via_pmt_on(self, host: Any, dependency: Dict[str, str]) -> Any:
        """Install a forge module (``module_name`` and optional ``version``)."""

    @abstractmethod
    def copy_module_to(self, host: Any, **opts: Any) -> Any:
        """Copy a module from ``opts['source']`` to ``host`` as ``opts['module_name']``."""

    def forge_stubbed_on(self, host: Any, forge_host: str) -> ContextManager[Any]:
        """Context in which ``host`` resolves the forge to ``forge_host``.

        Frameworks without forge stubbing keep the default, which changes
        nothing.
        """
        return contextlib.nullcontext()
