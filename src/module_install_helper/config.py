"""Runtime configuration for the module install helper.

Values are resolved once, in increasing precedence: built-in defaults, an
optional YAML file, then environment variables. The forge host and forge API
overrides are independent of each other.
"""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, replace
from typing import Any, Dict, Mapping, Optional

import yaml

from .constants import Constants

logger = logging.getLogger(__name__)

_SCHEME_RE = re.compile(r"^(https?|file)://", re.IGNORECASE)


def normalize_url(url: str) -> str:
    """Ensure ``url`` carries a scheme (https by default) and a trailing slash."""
    url = url.strip()
    if not _SCHEME_RE.match(url):
        url = "https://" + url
    if not url.endswith("/"):
        url += "/"
    return url


def load_config_file(path: str) -> Dict[str, Any]:
    """Load a YAML mapping of overrides; a missing file yields no overrides."""
    if not os.path.isfile(path):
        logger.warning("Config file not found: %s", path)
        return {}
    with open(path, "r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh) or {}
    if not isinstance(data, dict):
        logger.warning("Ignoring config file %s: top level is not a mapping", path)
        return {}
    return data


@dataclass(frozen=True)
class HelperConfig:
    """Resolved settings shared by every component of one test run."""

    forge_host: str = Constants.FORGE_HOST_DEFAULT
    forge_api: str = Constants.FORGE_API_DEFAULT
    stub_forge: bool = False
    request_timeout: float = Constants.REQUEST_TIMEOUT
    module_source_dir: Optional[str] = None

    @classmethod
    def from_env(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        config_file: Optional[str] = None,
        module_source_dir: Optional[str] = None,
    ) -> "HelperConfig":
        """Build a config from defaults, an optional YAML file and the environment.

        Args:
            environ: Environment mapping; defaults to ``os.environ``.
            config_file: YAML file path; defaults to the path named by
                ``BEAKER_MODULE_INSTALL_CONFIG`` when set.
            module_source_dir: Root directory of the module under test.
        """
        env = os.environ if environ is None else environ
        values: Dict[str, Any] = {}

        path = config_file or env.get(Constants.ENV_CONFIG_FILE)
        if path:
            data = load_config_file(path)
            for key in ("forge_host", "forge_api"):
                if data.get(key):
                    values[key] = normalize_url(str(data[key]))
            if data.get("request_timeout") is not None:
                values["request_timeout"] = float(data["request_timeout"])

        forge_host = (env.get(Constants.ENV_FORGE_HOST) or "").strip()
        if forge_host:
            values["forge_host"] = normalize_url(forge_host)
            values["stub_forge"] = True
        forge_api = (env.get(Constants.ENV_FORGE_API) or "").strip()
        if forge_api:
            values["forge_api"] = normalize_url(forge_api)
        timeout = env.get(Constants.ENV_TIMEOUT)
        if timeout:
            try:
                values["request_timeout"] = float(timeout)
            except ValueError:
                logger.warning("Ignoring non-numeric %s=%r", Constants.ENV_TIMEOUT, timeout)

        values["module_source_dir"] = module_source_dir
        return cls(**values)

    def with_module_source_dir(self, directory: Optional[str]) -> "HelperConfig":
        """Return a copy pointing at another module source directory."""
        return replace(self, module_source_dir=directory)

    @property
    def modules_api_url(self) -> str:
        """Base URL of the forge modules endpoint."""
        return f"{self.forge_api}{Constants.FORGE_MODULES_PATH}"
