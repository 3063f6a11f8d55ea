"""
In-memory store for exported logo files.

Handles returned from post-processing point at this store; the resources
endpoint serves them back by id.
"""
import uuid
from dataclasses import dataclass
from typing import Dict, Optional

from app.core.config import settings
from app.core.logging import logger


@dataclass(frozen=True)
class Resource:
    data: bytes
    media_type: str
    filename: str


@dataclass(frozen=True)
class ResourceHandle:
    resource_id: str
    url: str
    media_type: str
    filename: str


class ResourceStore:
    """Keeps exported resources for the lifetime of the process."""

    def __init__(self, url_prefix: str = None):
        self.url_prefix = (url_prefix or f"{settings.API_V1_STR}/logos/resources").rstrip("/")
        self._resources: Dict[str, Resource] = {}

    def put(self, data: bytes, media_type: str, filename: str) -> ResourceHandle:
        resource_id = uuid.uuid4().hex
        self._resources[resource_id] = Resource(data=data, media_type=media_type, filename=filename)
        logger.debug(f"Stored {media_type} resource {resource_id} ({len(data)} bytes)")
        return ResourceHandle(
            resource_id=resource_id,
            url=f"{self.url_prefix}/{resource_id}",
            media_type=media_type,
            filename=filename,
        )

    def get(self, resource_id: str) -> Optional[Resource]:
        return self._resources.get(resource_id)

    def __len__(self):
        return len(self._resources)
