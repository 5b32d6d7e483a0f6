"""
Data models for Yandex.Disk SDK.

This module defines the response objects of the Yandex.Disk API and the
query options accepted by resource requests.

https://yandex.com/dev/disk/api/reference/response-objects.html
"""

from datetime import datetime
from typing import Optional, List, Dict, Any
from dataclasses import dataclass, field
from enum import Enum

from .utils import parse_timestamp


def _expect_object(data: Any, name: str) -> None:
    if not isinstance(data, dict):
        raise TypeError(f"{name} must be a JSON object, got {type(data).__name__}")


class ResourceType(Enum):
    """Resource types."""
    FILE = "file"
    DIR = "dir"


@dataclass
class SystemFolders:
    """
    Absolute addresses of Disk system folders.

    Folder names depend on the user's interface language when the personal
    Disk is created, e.g. "Downloads" for an English-speaking user and
    "Загрузки" for a Russian-speaking one.
    """

    applications: str = ""
    downloads: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SystemFolders":
        """Create SystemFolders from API response dictionary."""
        _expect_object(data, "SystemFolders")
        return cls(
            applications=data.get("applications", ""),
            downloads=data.get("downloads", ""),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"applications": self.applications, "downloads": self.downloads}


@dataclass
class Disk:
    """Data about free and used space on the Disk."""

    trash_size: int = 0  # Cumulative size of the files in the Trash, bytes
    total_space: int = 0  # Total Disk space available to the user, bytes
    used_space: int = 0  # Cumulative size of the files stored on the Disk, bytes
    system_folders: SystemFolders = field(default_factory=SystemFolders)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Disk":
        """Create Disk from API response dictionary."""
        _expect_object(data, "Disk")
        return cls(
            trash_size=data.get("trash_size", 0),
            total_space=data.get("total_space", 0),
            used_space=data.get("used_space", 0),
            system_folders=SystemFolders.from_dict(data.get("system_folders") or {}),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert Disk to dictionary."""
        return {
            "trash_size": self.trash_size,
            "total_space": self.total_space,
            "used_space": self.used_space,
            "system_folders": self.system_folders.to_dict(),
        }

    @property
    def free_space(self) -> int:
        """Space left on the Disk, in bytes."""
        return max(self.total_space - self.used_space, 0)

    @property
    def usage_percentage(self) -> float:
        """Used space as percentage of the total."""
        if self.total_space == 0:
            return 0.0
        return (self.used_space / self.total_space) * 100


@dataclass
class Resource:
    """
    Metainformation about a file or folder.

    Keys the API leaves out of a response are ``None``: ``public_key`` and
    ``public_url`` appear only for published resources, ``embedded`` only for
    folders and ``origin_path`` only for resources in the Trash.
    """

    name: str = ""
    path: str = ""
    type: str = ""
    created: Optional[datetime] = None
    modified: Optional[datetime] = None
    md5: Optional[str] = None
    sha256: Optional[str] = None
    mime_type: Optional[str] = None
    media_type: Optional[str] = None
    size: Optional[int] = None
    revision: Optional[int] = None
    resource_id: Optional[str] = None
    preview: Optional[str] = None
    public_key: Optional[str] = None
    public_url: Optional[str] = None
    origin_path: Optional[str] = None
    custom_properties: Optional[Dict[str, str]] = None
    embedded: Optional["ResourceList"] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Resource":
        """Create Resource from API response dictionary."""
        _expect_object(data, "Resource")
        embedded = None
        if data.get("_embedded") is not None:
            embedded = ResourceList.from_dict(data["_embedded"])

        return cls(
            name=data.get("name", ""),
            path=data.get("path", ""),
            type=data.get("type", ""),
            created=parse_timestamp(data.get("created")),
            modified=parse_timestamp(data.get("modified")),
            md5=data.get("md5"),
            sha256=data.get("sha256"),
            mime_type=data.get("mime_type"),
            media_type=data.get("media_type"),
            size=data.get("size"),
            revision=data.get("revision"),
            resource_id=data.get("resource_id"),
            preview=data.get("preview"),
            public_key=data.get("public_key"),
            public_url=data.get("public_url"),
            origin_path=data.get("origin_path"),
            custom_properties=data.get("custom_properties"),
            embedded=embedded,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert Resource to dictionary, leaving out unset keys."""
        result = {
            "name": self.name,
            "path": self.path,
            "type": self.type,
        }

        optional = {
            "md5": self.md5,
            "sha256": self.sha256,
            "mime_type": self.mime_type,
            "media_type": self.media_type,
            "size": self.size,
            "revision": self.revision,
            "resource_id": self.resource_id,
            "preview": self.preview,
            "public_key": self.public_key,
            "public_url": self.public_url,
            "origin_path": self.origin_path,
            "custom_properties": self.custom_properties,
        }
        result.update({key: value for key, value in optional.items() if value is not None})

        if self.created:
            result["created"] = self.created.isoformat()
        if self.modified:
            result["modified"] = self.modified.isoformat()
        if self.embedded is not None:
            result["_embedded"] = self.embedded.to_dict()

        return result

    @property
    def is_dir(self) -> bool:
        return self.type == ResourceType.DIR.value

    @property
    def is_file(self) -> bool:
        return self.type == ResourceType.FILE.value


@dataclass
class ResourceList:
    """Resources contained in a folder, together with the list properties."""

    path: str = ""
    sort: str = ""
    items: List[Resource] = field(default_factory=list)
    limit: int = 0
    offset: int = 0
    total: int = 0
    public_key: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ResourceList":
        """Create ResourceList from API response dictionary."""
        _expect_object(data, "ResourceList")
        return cls(
            path=data.get("path", ""),
            sort=data.get("sort", ""),
            items=[Resource.from_dict(item) for item in data.get("items") or []],
            limit=data.get("limit", 0),
            offset=data.get("offset", 0),
            total=data.get("total", 0),
            public_key=data.get("public_key"),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert ResourceList to dictionary."""
        result = {
            "path": self.path,
            "sort": self.sort,
            "items": [item.to_dict() for item in self.items],
            "limit": self.limit,
            "offset": self.offset,
            "total": self.total,
        }
        if self.public_key is not None:
            result["public_key"] = self.public_key
        return result


@dataclass
class ResourcesOptions:
    """
    Optional parameters of a resource metainformation request.

    sort: key to sort the folder listing by ("name", "path", "created",
        "modified", "size"); prefix with "-" for reverse order.
    limit: number of folder items to describe (the API default is 20).
    offset: number of folder items to skip from the top of the list.
    fields: JSON keys to keep in the response, nested keys separated by
        dots, e.g. ["name", "_embedded.items.path"].
    preview_size: preview size, either a predefined one ("S", "M", "L",
        "XL", "XXL", "XXXL") or exact dimensions ("120", "x145", "120x240").
    preview_crop: crop the preview to the size given in preview_size.
    """

    sort: Optional[str] = None
    limit: Optional[int] = None
    offset: Optional[int] = None
    fields: Optional[List[str]] = None
    preview_size: Optional[str] = None
    preview_crop: Optional[bool] = None

    def to_params(self) -> Dict[str, Any]:
        """Convert options to API query parameters."""
        params = {}

        if self.sort:
            params["sort"] = self.sort
        if self.limit is not None:
            params["limit"] = self.limit
        if self.offset is not None:
            params["offset"] = self.offset
        if self.fields:
            params["fields"] = ",".join(self.fields)
        if self.preview_size:
            params["preview_size"] = self.preview_size
        if self.preview_crop is not None:
            params["preview_crop"] = str(self.preview_crop).lower()

        return params
