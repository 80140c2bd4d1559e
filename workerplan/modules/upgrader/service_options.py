"""Per-version Kubernetes service options for plan generation."""
import logging
import re
import time
from typing import Any, Dict, Optional

import requests

from workerplan.config import Config
from .errors import ServiceOptionsError
from .interfaces import OptionsResolver

logger = logging.getLogger("upgrader.service_options")

LINUX = 'linux'
WINDOWS = 'windows'

SERVICE_OPTIONS_KEY = 'k8s-service-options'
WINDOWS_SERVICE_OPTIONS_KEY = 'k8s-windows-service-options'

_METADATA_KEYS = {
    LINUX: 'K8sVersionServiceOptions',
    WINDOWS: 'K8sVersionWindowsServiceOptions',
}

_MINOR_VERSION = re.compile(r'^(v\d+\.\d+)')


def resolve_service_options(resolver: OptionsResolver, k8s_version: str, os_type: str) -> Dict[str, Any]:
    """Build the service options bundle handed to the plan generation engine.

    Linux options are always looked up; Windows options are added for
    Windows hosts. Empty lookups are left out of the bundle.

    Raises:
        ServiceOptionsError: If the resolver fails
    """
    data: Dict[str, Any] = {}

    try:
        options = resolver.resolve_options(k8s_version, LINUX)
    except Exception as e:
        logger.error(f"getK8sServiceOptions: k8sVersion {k8s_version} [{e}]")
        raise ServiceOptionsError(f"failed to resolve service options for {k8s_version}: {e}") from e
    if options:
        data[SERVICE_OPTIONS_KEY] = options

    if os_type == WINDOWS:
        try:
            windows_options = resolver.resolve_options(k8s_version, WINDOWS)
        except Exception as e:
            logger.error(f"getK8sServiceOptionsWindows: k8sVersion {k8s_version} [{e}]")
            raise ServiceOptionsError(
                f"failed to resolve windows service options for {k8s_version}: {e}"
            ) from e
        if windows_options:
            data[WINDOWS_SERVICE_OPTIONS_KEY] = windows_options

    return data


class MetadataOptionsResolver:
    """Resolves service options from a Kubernetes driver metadata document.

    The document is cached for ``cache_ttl`` seconds and downloaded again on
    the first lookup after that.
    """

    def __init__(self, url: Optional[str] = None, timeout: Optional[int] = None,
                 cache_ttl: Optional[int] = None):
        self.url = url or Config.KDM_DATA_URL
        self.timeout = timeout or Config.API_TIMEOUT
        self.cache_ttl = Config.KDM_CACHE_TTL if cache_ttl is None else cache_ttl
        self._data: Optional[Dict[str, Any]] = None
        self._loaded_at = 0.0

    def _metadata(self) -> Dict[str, Any]:
        now = time.monotonic()
        if self._data is None or now - self._loaded_at >= self.cache_ttl:
            logger.debug(f"Loading driver metadata from {self.url}")
            response = requests.get(self.url, timeout=self.timeout)
            response.raise_for_status()
            self._data = response.json()
            self._loaded_at = now
        return self._data

    def resolve_options(self, k8s_version: str, os_kind: str) -> Optional[Dict[str, Any]]:
        """Return the service options for ``k8s_version``, or None if the version is unknown.

        Exact version keys win; otherwise the ``vMAJOR.MINOR`` entry is used.
        """
        try:
            key = _METADATA_KEYS[os_kind]
        except KeyError:
            raise ValueError(f"Unsupported OS kind: {os_kind}")

        options = self._metadata().get(key) or {}
        if k8s_version in options:
            return options[k8s_version]

        match = _MINOR_VERSION.match(k8s_version or '')
        if match:
            return options.get(match.group(1))
        return None
