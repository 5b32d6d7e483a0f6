"""
Yandex.Disk SDK - Python client for the Yandex.Disk REST API.

This package provides:
- Disk quota and system folder information
- File and folder metainformation, including folder listings
- Synchronous (requests) and async/await (aiohttp) clients
- A CLI tool for inspecting a Disk from the terminal
"""

__version__ = "1.0.0"

from .client import YandexDiskClient
from .async_client import AsyncYandexDiskClient
from .config import ClientConfig
from .destinations import RawSink, Typed
from .request import ApiRequest, DEFAULT_BASE_URL, API_VERSION
from .models import (
    Disk,
    SystemFolders,
    Resource,
    ResourceList,
    ResourcesOptions,
    ResourceType,
)
from .exceptions import (
    YandexDiskError,
    APIError,
    InvalidURLError,
    SerializationError,
    ConfigurationError,
)

__all__ = [
    # Main clients
    "YandexDiskClient",
    "AsyncYandexDiskClient",
    "ClientConfig",

    # Transport
    "ApiRequest",
    "RawSink",
    "Typed",
    "DEFAULT_BASE_URL",
    "API_VERSION",

    # Data models
    "Disk",
    "SystemFolders",
    "Resource",
    "ResourceList",
    "ResourcesOptions",
    "ResourceType",

    # Exceptions
    "YandexDiskError",
    "APIError",
    "InvalidURLError",
    "SerializationError",
    "ConfigurationError",
]
