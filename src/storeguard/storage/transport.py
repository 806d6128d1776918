"""Transport interface: one network round trip per call, no retries.

A transport method is named after the request's ``rpc`` and returns a
``StatusOr`` instead of raising for remote failures. Implementations must be
safe for concurrent use; the retry layer shares one transport across calls.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from storeguard.foundation.errors import StatusOr

from .metadata import (
    AccessControl,
    BucketMetadata,
    EmptyResponse,
    ListAccessControlsResponse,
    ListBucketsResponse,
    ListNotificationsResponse,
    ListObjectsResponse,
    NotificationMetadata,
    ObjectMetadata,
    ReadObjectResponse,
)
from .requests import (
    ComposeObjectRequest,
    CopyObjectRequest,
    CreateBucketAclRequest,
    CreateBucketRequest,
    CreateDefaultObjectAclRequest,
    CreateNotificationRequest,
    CreateObjectAclRequest,
    DeleteBucketAclRequest,
    DeleteBucketRequest,
    DeleteDefaultObjectAclRequest,
    DeleteNotificationRequest,
    DeleteObjectAclRequest,
    DeleteObjectRequest,
    GetBucketAclRequest,
    GetBucketMetadataRequest,
    GetDefaultObjectAclRequest,
    GetNotificationRequest,
    GetObjectAclRequest,
    GetObjectMetadataRequest,
    InsertObjectMediaRequest,
    ListBucketAclRequest,
    ListBucketsRequest,
    ListDefaultObjectAclRequest,
    ListNotificationsRequest,
    ListObjectAclRequest,
    ListObjectsRequest,
    PatchBucketAclRequest,
    PatchBucketRequest,
    PatchDefaultObjectAclRequest,
    PatchObjectAclRequest,
    PatchObjectRequest,
    ReadObjectRequest,
    UpdateBucketAclRequest,
    UpdateBucketRequest,
    UpdateDefaultObjectAclRequest,
    UpdateObjectAclRequest,
    UpdateObjectRequest,
)


@runtime_checkable
class RawClient(Protocol):
    """Synchronous single-attempt storage transport."""

    # Buckets
    def list_buckets(self, request: ListBucketsRequest) -> StatusOr[ListBucketsResponse]: ...
    def create_bucket(self, request: CreateBucketRequest) -> StatusOr[BucketMetadata]: ...
    def get_bucket_metadata(self, request: GetBucketMetadataRequest) -> StatusOr[BucketMetadata]: ...
    def delete_bucket(self, request: DeleteBucketRequest) -> StatusOr[EmptyResponse]: ...
    def update_bucket(self, request: UpdateBucketRequest) -> StatusOr[BucketMetadata]: ...
    def patch_bucket(self, request: PatchBucketRequest) -> StatusOr[BucketMetadata]: ...

    # Objects
    def list_objects(self, request: ListObjectsRequest) -> StatusOr[ListObjectsResponse]: ...
    def insert_object_media(self, request: InsertObjectMediaRequest) -> StatusOr[ObjectMetadata]: ...
    def get_object_metadata(self, request: GetObjectMetadataRequest) -> StatusOr[ObjectMetadata]: ...
    def read_object(self, request: ReadObjectRequest) -> StatusOr[ReadObjectResponse]: ...
    def delete_object(self, request: DeleteObjectRequest) -> StatusOr[EmptyResponse]: ...
    def update_object(self, request: UpdateObjectRequest) -> StatusOr[ObjectMetadata]: ...
    def patch_object(self, request: PatchObjectRequest) -> StatusOr[ObjectMetadata]: ...
    def copy_object(self, request: CopyObjectRequest) -> StatusOr[ObjectMetadata]: ...
    def compose_object(self, request: ComposeObjectRequest) -> StatusOr[ObjectMetadata]: ...

    # Bucket ACL
    def list_bucket_acl(self, request: ListBucketAclRequest) -> StatusOr[ListAccessControlsResponse]: ...
    def get_bucket_acl(self, request: GetBucketAclRequest) -> StatusOr[AccessControl]: ...
    def create_bucket_acl(self, request: CreateBucketAclRequest) -> StatusOr[AccessControl]: ...
    def update_bucket_acl(self, request: UpdateBucketAclRequest) -> StatusOr[AccessControl]: ...
    def delete_bucket_acl(self, request: DeleteBucketAclRequest) -> StatusOr[EmptyResponse]: ...
    def patch_bucket_acl(self, request: PatchBucketAclRequest) -> StatusOr[AccessControl]: ...

    # Object ACL
    def list_object_acl(self, request: ListObjectAclRequest) -> StatusOr[ListAccessControlsResponse]: ...
    def get_object_acl(self, request: GetObjectAclRequest) -> StatusOr[AccessControl]: ...
    def create_object_acl(self, request: CreateObjectAclRequest) -> StatusOr[AccessControl]: ...
    def update_object_acl(self, request: UpdateObjectAclRequest) -> StatusOr[AccessControl]: ...
    def delete_object_acl(self, request: DeleteObjectAclRequest) -> StatusOr[EmptyResponse]: ...
    def patch_object_acl(self, request: PatchObjectAclRequest) -> StatusOr[AccessControl]: ...

    # Default object ACL
    def list_default_object_acl(self, request: ListDefaultObjectAclRequest) -> StatusOr[ListAccessControlsResponse]: ...
    def get_default_object_acl(self, request: GetDefaultObjectAclRequest) -> StatusOr[AccessControl]: ...
    def create_default_object_acl(self, request: CreateDefaultObjectAclRequest) -> StatusOr[AccessControl]: ...
    def update_default_object_acl(self, request: UpdateDefaultObjectAclRequest) -> StatusOr[AccessControl]: ...
    def delete_default_object_acl(self, request: DeleteDefaultObjectAclRequest) -> StatusOr[EmptyResponse]: ...
    def patch_default_object_acl(self, request: PatchDefaultObjectAclRequest) -> StatusOr[AccessControl]: ...

    # Notifications
    def list_notifications(self, request: ListNotificationsRequest) -> StatusOr[ListNotificationsResponse]: ...
    def create_notification(self, request: CreateNotificationRequest) -> StatusOr[NotificationMetadata]: ...
    def get_notification(self, request: GetNotificationRequest) -> StatusOr[NotificationMetadata]: ...
    def delete_notification(self, request: DeleteNotificationRequest) -> StatusOr[EmptyResponse]: ...


@runtime_checkable
class AsyncRawClient(Protocol):
    """Asynchronous single-attempt storage transport (same method family)."""

    # Buckets
    async def list_buckets(self, request: ListBucketsRequest) -> StatusOr[ListBucketsResponse]: ...
    async def create_bucket(self, request: CreateBucketRequest) -> StatusOr[BucketMetadata]: ...
    async def get_bucket_metadata(self, request: GetBucketMetadataRequest) -> StatusOr[BucketMetadata]: ...
    async def delete_bucket(self, request: DeleteBucketRequest) -> StatusOr[EmptyResponse]: ...
    async def update_bucket(self, request: UpdateBucketRequest) -> StatusOr[BucketMetadata]: ...
    async def patch_bucket(self, request: PatchBucketRequest) -> StatusOr[BucketMetadata]: ...

    # Objects
    async def list_objects(self, request: ListObjectsRequest) -> StatusOr[ListObjectsResponse]: ...
    async def insert_object_media(self, request: InsertObjectMediaRequest) -> StatusOr[ObjectMetadata]: ...
    async def get_object_metadata(self, request: GetObjectMetadataRequest) -> StatusOr[ObjectMetadata]: ...
    async def read_object(self, request: ReadObjectRequest) -> StatusOr[ReadObjectResponse]: ...
    async def delete_object(self, request: DeleteObjectRequest) -> StatusOr[EmptyResponse]: ...
    async def update_object(self, request: UpdateObjectRequest) -> StatusOr[ObjectMetadata]: ...
    async def patch_object(self, request: PatchObjectRequest) -> StatusOr[ObjectMetadata]: ...
    async def copy_object(self, request: CopyObjectRequest) -> StatusOr[ObjectMetadata]: ...
    async def compose_object(self, request: ComposeObjectRequest) -> StatusOr[ObjectMetadata]: ...

    # Bucket ACL
    async def list_bucket_acl(self, request: ListBucketAclRequest) -> StatusOr[ListAccessControlsResponse]: ...
    async def get_bucket_acl(self, request: GetBucketAclRequest) -> StatusOr[AccessControl]: ...
    async def create_bucket_acl(self, request: CreateBucketAclRequest) -> StatusOr[AccessControl]: ...
    async def update_bucket_acl(self, request: UpdateBucketAclRequest) -> StatusOr[AccessControl]: ...
    async def delete_bucket_acl(self, request: DeleteBucketAclRequest) -> StatusOr[EmptyResponse]: ...
    async def patch_bucket_acl(self, request: PatchBucketAclRequest) -> StatusOr[AccessControl]: ...

    # Object ACL
    async def list_object_acl(self, request: ListObjectAclRequest) -> StatusOr[ListAccessControlsResponse]: ...
    async def get_object_acl(self, request: GetObjectAclRequest) -> StatusOr[AccessControl]: ...
    async def create_object_acl(self, request: CreateObjectAclRequest) -> StatusOr[AccessControl]: ...
    async def update_object_acl(self, request: UpdateObjectAclRequest) -> StatusOr[AccessControl]: ...
    async def delete_object_acl(self, request: DeleteObjectAclRequest) -> StatusOr[EmptyResponse]: ...
    async def patch_object_acl(self, request: PatchObjectAclRequest) -> StatusOr[AccessControl]: ...

    # Default object ACL
    async def list_default_object_acl(self, request: ListDefaultObjectAclRequest) -> StatusOr[ListAccessControlsResponse]: ...
    async def get_default_object_acl(self, request: GetDefaultObjectAclRequest) -> StatusOr[AccessControl]: ...
    async def create_default_object_acl(self, request: CreateDefaultObjectAclRequest) -> StatusOr[AccessControl]: ...
    async def update_default_object_acl(self, request: UpdateDefaultObjectAclRequest) -> StatusOr[AccessControl]: ...
    async def delete_default_object_acl(self, request: DeleteDefaultObjectAclRequest) -> StatusOr[EmptyResponse]: ...
    async def patch_default_object_acl(self, request: PatchDefaultObjectAclRequest) -> StatusOr[AccessControl]: ...

    # Notifications
    async def list_notifications(self, request: ListNotificationsRequest) -> StatusOr[ListNotificationsResponse]: ...
    async def create_notification(self, request: CreateNotificationRequest) -> StatusOr[NotificationMetadata]: ...
    async def get_notification(self, request: GetNotificationRequest) -> StatusOr[NotificationMetadata]: ...
    async def delete_notification(self, request: DeleteNotificationRequest) -> StatusOr[EmptyResponse]: ...
