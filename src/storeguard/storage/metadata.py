"""Response values returned by the storage transport.

These are deliberately thin: the retry layer never inspects payloads, it
only passes them back to the caller inside ``Ok``.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class _Metadata(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)


class BucketMetadata(_Metadata):
    name: str
    location: str = ""
    storage_class: str = ""
    metageneration: int = 0
    labels: dict[str, str] = Field(default_factory=dict)


class ObjectMetadata(_Metadata):
    bucket: str
    name: str
    generation: int = 0
    metageneration: int = 0
    size: int = 0
    content_type: str = ""
    metadata: dict[str, str] = Field(default_factory=dict)


class AccessControl(_Metadata):
    """One ACL entry on a bucket, an object, or a bucket's default object ACL."""
    entity: str
    role: str
    etag: str = ""


class NotificationMetadata(_Metadata):
    id: str = ""
    topic: str = ""
    payload_format: str = ""
    event_types: tuple[str, ...] = ()
    object_name_prefix: str = ""
    custom_attributes: dict[str, str] = Field(default_factory=dict)
    etag: str = ""
    self_link: str = Field(default="", alias="selfLink")


class ListBucketsResponse(_Metadata):
    items: list[BucketMetadata] = Field(default_factory=list)
    next_page_token: str = ""


class ListObjectsResponse(_Metadata):
    items: list[ObjectMetadata] = Field(default_factory=list)
    next_page_token: str = ""


class ListAccessControlsResponse(_Metadata):
    items: list[AccessControl] = Field(default_factory=list)


class ListNotificationsResponse(_Metadata):
    items: list[NotificationMetadata] = Field(default_factory=list)


class ReadObjectResponse(_Metadata):
    metadata: ObjectMetadata
    contents: bytes = b""


class EmptyResponse(_Metadata):
    """Successful reply to a delete; carries no payload."""
