"""
Client configuration for Yandex.Disk SDK.
"""

import os
from dataclasses import dataclass
from typing import Optional, Mapping

from .exceptions import ConfigurationError
from .request import DEFAULT_BASE_URL


TOKEN_ENV_VARS = ("YANDEX_DISK_TOKEN", "ACCESS_TOKEN")
BASE_URL_ENV_VAR = "YANDEX_DISK_BASE_URL"


@dataclass(frozen=True)
class ClientConfig:
    """
    Immutable settings shared by the sync and async clients.

    Raises ConfigurationError for an empty access token or a base URL that
    is not an absolute http(s) URL.
    """

    access_token: str
    base_url: str = DEFAULT_BASE_URL
    timeout: float = 30.0

    def __post_init__(self):
        if not self.access_token:
            raise ConfigurationError("Access token is required.", config_key="access_token")
        if not self.base_url.startswith(("http://", "https://")):
            raise ConfigurationError(
                f"Base URL must be absolute, got {self.base_url!r}", config_key="base_url"
            )
        if not self.base_url.endswith("/"):
            # urljoin drops the last path segment of a base without a trailing slash
            object.__setattr__(self, "base_url", self.base_url + "/")

    @classmethod
    def from_env(
        cls,
        access_token: Optional[str] = None,
        environ: Optional[Mapping[str, str]] = None,
        **kwargs,
    ) -> "ClientConfig":
        """
        Build configuration from explicit values with environment fallbacks.

        The token is read from YANDEX_DISK_TOKEN or ACCESS_TOKEN, the base URL
        from YANDEX_DISK_BASE_URL.
        """
        environ = os.environ if environ is None else environ

        token = access_token
        for name in TOKEN_ENV_VARS:
            if token:
                break
            token = environ.get(name)

        if not token:
            raise ConfigurationError(
                "Access token not configured. Pass it explicitly or set YANDEX_DISK_TOKEN environment variable.",
                config_key="access_token",
            )

        if "base_url" not in kwargs and environ.get(BASE_URL_ENV_VAR):
            kwargs["base_url"] = environ[BASE_URL_ENV_VAR]

        return cls(access_token=token, **kwargs)
