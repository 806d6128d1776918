"""Storage requests, responses, transport interface and the retrying client."""

from .client import AsyncRetryClient, RetryClient
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
    StorageRequest,
    UpdateBucketAclRequest,
    UpdateBucketRequest,
    UpdateDefaultObjectAclRequest,
    UpdateObjectAclRequest,
    UpdateObjectRequest,
)
from .transport import AsyncRawClient, RawClient

__all__ = [
    # Client
    "RetryClient", "AsyncRetryClient",
    # Transport
    "RawClient", "AsyncRawClient",
    # Requests
    "StorageRequest",
    "ListBucketsRequest", "CreateBucketRequest", "GetBucketMetadataRequest",
    "DeleteBucketRequest", "UpdateBucketRequest", "PatchBucketRequest",
    "ListObjectsRequest", "InsertObjectMediaRequest", "GetObjectMetadataRequest",
    "ReadObjectRequest", "DeleteObjectRequest", "UpdateObjectRequest",
    "PatchObjectRequest", "CopyObjectRequest", "ComposeObjectRequest",
    "ListBucketAclRequest", "GetBucketAclRequest", "CreateBucketAclRequest",
    "UpdateBucketAclRequest", "DeleteBucketAclRequest", "PatchBucketAclRequest",
    "ListObjectAclRequest", "GetObjectAclRequest", "CreateObjectAclRequest",
    "UpdateObjectAclRequest", "DeleteObjectAclRequest", "PatchObjectAclRequest",
    "ListDefaultObjectAclRequest", "GetDefaultObjectAclRequest", "CreateDefaultObjectAclRequest",
    "UpdateDefaultObjectAclRequest", "DeleteDefaultObjectAclRequest", "PatchDefaultObjectAclRequest",
    "ListNotificationsRequest", "CreateNotificationRequest", "GetNotificationRequest",
    "DeleteNotificationRequest",
    # Responses
    "BucketMetadata", "ObjectMetadata", "AccessControl", "NotificationMetadata",
    "ListBucketsResponse", "ListObjectsResponse", "ListAccessControlsResponse",
    "ListNotificationsResponse", "ReadObjectResponse", "EmptyResponse",
]
