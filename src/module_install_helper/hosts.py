"""Host list helpers.

Hosts are opaque records owned by the test framework; only their ``roles``
entry is read here.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any, List

from .constants import Constants


def host_roles(host: Any) -> List[str]:
    """Return the role names of ``host`` (mapping key or attribute)."""
    if isinstance(host, Mapping):
        roles = host.get("roles")
    else:
        roles = getattr(host, "roles", None)
    return list(roles or [])


def as_host_list(hosts: Any) -> List[Any]:
    """Accept a single host or an iterable of hosts and return a list."""
    if isinstance(hosts, (Mapping, str)) or not isinstance(hosts, Iterable):
        return [hosts]
    return list(hosts)


def select_hosts_by_role(hosts: Iterable[Any], role: str) -> List[Any]:
    """Return the hosts carrying ``role``, in input order."""
    return [host for host in hosts if role in host_roles(host)]


def hosts_to_install_module_on(hosts: Iterable[Any]) -> List[Any]:
    """Pick install targets: masters if any, else agents, else every host."""
    hosts = as_host_list(hosts)
    masters = select_hosts_by_role(hosts, Constants.MASTER_ROLE)
    if masters:
        return masters
    agents = select_hosts_by_role(hosts, Constants.AGENT_ROLE)
    if agents:
        return agents
    return hosts
