"""Request values for storage operations.

Each request class declares, at class level, the facts the retry layer
needs: its ``kind``, the transport method that executes it (``rpc``),
whether replaying it is harmless by construction (``replay_safe``), and
which of its fields act as preconditions that make a mutation safe to
repeat (``preconditions``).

Example:
    >>> DeleteObjectRequest(bucket_name="b", object_name="o").has_precondition()
    False
    >>> DeleteObjectRequest(bucket_name="b", object_name="o", generation=7).has_precondition()
    True
"""

from __future__ import annotations

from typing import Annotated, Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field

from storeguard.runtime.retry.idempotency import RequestKind

NonEmpty = Annotated[str, Field(min_length=1)]


class StorageRequest(BaseModel):
    """Base class for all storage requests. Immutable once submitted."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        str_strip_whitespace=True,
        revalidate_instances="never",
    )

    kind: ClassVar[RequestKind]
    rpc: ClassVar[str]
    replay_safe: ClassVar[bool] = False
    preconditions: ClassVar[tuple[str, ...]] = ()

    def has_precondition(self) -> bool:
        return any(getattr(self, name) is not None for name in self.preconditions)

    def describe(self) -> str:
        """Short label for logs, e.g. ``delete_object(bucket_name=b, object_name=o)``."""
        fields = ", ".join(
            f"{k}={v}" for k, v in self.model_dump(exclude_none=True).items()
            if isinstance(v, (str, int))
        )
        return f"{self.rpc}({fields})"


class _BucketScoped(StorageRequest):
    bucket_name: NonEmpty


class _ObjectScoped(_BucketScoped):
    object_name: NonEmpty


# ─────────────────────────────────────────────────────────────────────────────
# Buckets
# ─────────────────────────────────────────────────────────────────────────────


class ListBucketsRequest(StorageRequest):
    kind = RequestKind.READ
    rpc = "list_buckets"

    project_id: NonEmpty
    prefix: str | None = None
    page_token: str | None = None


class CreateBucketRequest(StorageRequest):
    """Replaying a create fails with ALREADY_EXISTS; it never makes two buckets."""
    kind = RequestKind.CREATE
    rpc = "create_bucket"
    replay_safe = True

    project_id: NonEmpty
    bucket_name: NonEmpty
    location: str | None = None
    storage_class: str | None = None


class GetBucketMetadataRequest(_BucketScoped):
    kind = RequestKind.READ
    rpc = "get_bucket_metadata"

    if_metageneration_match: int | None = None


class DeleteBucketRequest(_BucketScoped):
    kind = RequestKind.DELETE
    rpc = "delete_bucket"
    preconditions = ("if_metageneration_match",)

    if_metageneration_match: int | None = None


class UpdateBucketRequest(_BucketScoped):
    kind = RequestKind.UPDATE
    rpc = "update_bucket"
    preconditions = ("if_metageneration_match",)

    labels: dict[str, str] = Field(default_factory=dict)
    storage_class: str | None = None
    if_metageneration_match: int | None = None


class PatchBucketRequest(_BucketScoped):
    kind = RequestKind.UPDATE
    rpc = "patch_bucket"
    preconditions = ("if_metageneration_match",)

    patch: dict[str, Any] = Field(default_factory=dict)
    if_metageneration_match: int | None = None


# ─────────────────────────────────────────────────────────────────────────────
# Objects
# ─────────────────────────────────────────────────────────────────────────────


class ListObjectsRequest(_BucketScoped):
    kind = RequestKind.READ
    rpc = "list_objects"

    prefix: str | None = None
    page_token: str | None = None


class InsertObjectMediaRequest(_ObjectScoped):
    kind = RequestKind.CREATE
    rpc = "insert_object_media"
    preconditions = ("if_generation_match",)

    contents: bytes = b""
    content_type: str | None = None
    if_generation_match: int | None = None


class GetObjectMetadataRequest(_ObjectScoped):
    kind = RequestKind.READ
    rpc = "get_object_metadata"

    generation: int | None = None


class ReadObjectRequest(_ObjectScoped):
    kind = RequestKind.READ
    rpc = "read_object"

    generation: int | None = None


class DeleteObjectRequest(_ObjectScoped):
    """Idempotent only when scoped to a generation or guarded by a match."""
    kind = RequestKind.DELETE
    rpc = "delete_object"
    preconditions = ("generation", "if_generation_match")

    generation: int | None = None
    if_generation_match: int | None = None


class UpdateObjectRequest(_ObjectScoped):
    kind = RequestKind.UPDATE
    rpc = "update_object"
    preconditions = ("if_metageneration_match",)

    metadata: dict[str, str] = Field(default_factory=dict)
    content_type: str | None = None
    if_metageneration_match: int | None = None


class PatchObjectRequest(_ObjectScoped):
    kind = RequestKind.UPDATE
    rpc = "patch_object"
    preconditions = ("if_metageneration_match",)

    patch: dict[str, Any] = Field(default_factory=dict)
    if_metageneration_match: int | None = None


class CopyObjectRequest(StorageRequest):
    kind = RequestKind.CREATE
    rpc = "copy_object"
    preconditions = ("if_generation_match",)

    source_bucket: NonEmpty
    source_object: NonEmpty
    destination_bucket: NonEmpty
    destination_object: NonEmpty
    if_generation_match: int | None = None


class ComposeObjectRequest(_BucketScoped):
    kind = RequestKind.CREATE
    rpc = "compose_object"
    preconditions = ("if_generation_match",)

    source_objects: tuple[str, ...] = Field(min_length=1)
    destination_object: NonEmpty
    if_generation_match: int | None = None


# ─────────────────────────────────────────────────────────────────────────────
# Access control lists
#
# Create, update and delete are keyed by entity and set an absolute role, so
# replaying them converges on the same ACL. Patch is relative and needs an
# etag guard.
# ─────────────────────────────────────────────────────────────────────────────


class _EntityScoped(_BucketScoped):
    entity: NonEmpty


class ListBucketAclRequest(_BucketScoped):
    kind = RequestKind.READ
    rpc = "list_bucket_acl"


class GetBucketAclRequest(_EntityScoped):
    kind = RequestKind.READ
    rpc = "get_bucket_acl"


class CreateBucketAclRequest(_EntityScoped):
    kind = RequestKind.CREATE
    rpc = "create_bucket_acl"
    replay_safe = True

    role: NonEmpty


class UpdateBucketAclRequest(_EntityScoped):
    kind = RequestKind.UPDATE
    rpc = "update_bucket_acl"
    replay_safe = True

    role: NonEmpty


class DeleteBucketAclRequest(_EntityScoped):
    kind = RequestKind.DELETE
    rpc = "delete_bucket_acl"
    replay_safe = True


class PatchBucketAclRequest(_EntityScoped):
    kind = RequestKind.UPDATE
    rpc = "patch_bucket_acl"
    preconditions = ("if_match_etag",)

    role: NonEmpty
    if_match_etag: str | None = None


class _ObjectEntityScoped(_EntityScoped):
    object_name: NonEmpty
    generation: int | None = None


class ListObjectAclRequest(_ObjectScoped):
    kind = RequestKind.READ
    rpc = "list_object_acl"

    generation: int | None = None


class GetObjectAclRequest(_ObjectEntityScoped):
    kind = RequestKind.READ
    rpc = "get_object_acl"


class CreateObjectAclRequest(_ObjectEntityScoped):
    kind = RequestKind.CREATE
    rpc = "create_object_acl"
    replay_safe = True

    role: NonEmpty


class UpdateObjectAclRequest(_ObjectEntityScoped):
    kind = RequestKind.UPDATE
    rpc = "update_object_acl"
    replay_safe = True

    role: NonEmpty


class DeleteObjectAclRequest(_ObjectEntityScoped):
    kind = RequestKind.DELETE
    rpc = "delete_object_acl"
    replay_safe = True


class PatchObjectAclRequest(_ObjectEntityScoped):
    kind = RequestKind.UPDATE
    rpc = "patch_object_acl"
    preconditions = ("if_match_etag",)

    role: NonEmpty
    if_match_etag: str | None = None


class ListDefaultObjectAclRequest(_BucketScoped):
    kind = RequestKind.READ
    rpc = "list_default_object_acl"


class GetDefaultObjectAclRequest(_EntityScoped):
    kind = RequestKind.READ
    rpc = "get_default_object_acl"


class CreateDefaultObjectAclRequest(_EntityScoped):
    kind = RequestKind.CREATE
    rpc = "create_default_object_acl"
    replay_safe = True

    role: NonEmpty


class UpdateDefaultObjectAclRequest(_EntityScoped):
    kind = RequestKind.UPDATE
    rpc = "update_default_object_acl"
    replay_safe = True

    role: NonEmpty


class DeleteDefaultObjectAclRequest(_EntityScoped):
    kind = RequestKind.DELETE
    rpc = "delete_default_object_acl"
    replay_safe = True


class PatchDefaultObjectAclRequest(_EntityScoped):
    kind = RequestKind.UPDATE
    rpc = "patch_default_object_acl"
    preconditions = ("if_match_etag",)

    role: NonEmpty
    if_match_etag: str | None = None


# ─────────────────────────────────────────────────────────────────────────────
# Notifications
# ─────────────────────────────────────────────────────────────────────────────


class ListNotificationsRequest(_BucketScoped):
    kind = RequestKind.READ
    rpc = "list_notifications"


class CreateNotificationRequest(_BucketScoped):
    """Never idempotent: each successful create registers another notification."""
    kind = RequestKind.CREATE
    rpc = "create_notification"

    topic: NonEmpty
    payload_format: str = "JSON_API_V1"
    event_types: tuple[str, ...] = ()
    object_name_prefix: str | None = None
    custom_attributes: dict[str, str] = Field(default_factory=dict)


class GetNotificationRequest(_BucketScoped):
    kind = RequestKind.READ
    rpc = "get_notification"

    notification_id: NonEmpty


class DeleteNotificationRequest(_BucketScoped):
    kind = RequestKind.DELETE
    rpc = "delete_notification"
    replay_safe = True

    notification_id: NonEmpty
