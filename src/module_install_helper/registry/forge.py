"""Puppet Forge registry client."""

from __future__ import annotations

import json
import logging
from typing import List, Optional
from urllib.parse import quote

from ..common import http_client
from ..config import HelperConfig
from ..errors import RegistryQueryFailed
from ..versioning.models import Release

logger = logging.getLogger(__name__)

HEADERS_JSON = {"Accept": "application/json"}


class ForgeClient:
    """Looks up published releases of a module on the forge API."""

    def __init__(self, config: Optional[HelperConfig] = None):
        self.config = config or HelperConfig()

    def module_url(self, module_name: str) -> str:
        """Return the API URL describing ``module_name``."""
        return f"{self.config.modules_api_url}{quote(module_name, safe='-_.')}"

    def query_registry(self, module_name: str) -> List[Release]:
        """Return the releases of ``module_name`` in feed order (newest first).

        Raises:
            RegistryQueryFailed: transport failure, an error status, or a body
                that is not a forge module document.
        """
        url = self.module_url(module_name)
        status_code, _, text = http_client.robust_get(
            url, headers=HEADERS_JSON, timeout=self.config.request_timeout
        )
        if status_code == 0 or status_code >= 400:
            logger.error("Forge lookup for %s failed with status %s", module_name, status_code)
            raise RegistryQueryFailed(url, text, status_code or None)

        try:
            data = json.loads(text)
        except json.JSONDecodeError:
            raise RegistryQueryFailed(url, text, status_code) from None
        if not isinstance(data, dict):
            raise RegistryQueryFailed(url, text, status_code)

        releases = []
        for entry in data.get("releases") or []:
            if isinstance(entry, dict) and entry.get("version"):
                releases.append(
                    Release(
                        version=str(entry["version"]),
                        slug=entry.get("slug"),
                        file_uri=entry.get("file_uri"),
                    )
                )
        logger.debug("Forge lists %d releases for %s", len(releases), module_name)
        return releases
