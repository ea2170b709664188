import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Protocol

import boto3
from botocore.client import Config
from botocore.exceptions import ClientError

from app.core.config import Settings

logger = logging.getLogger(__name__)

_NOT_FOUND_CODES = frozenset({"404", "NoSuchKey", "NotFound"})


@dataclass(frozen=True)
class ObjectHead:
    content_type: str | None
    size: int | None
    last_modified: datetime | None
    metadata: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class ListedObject:
    key: str
    size: int
    last_modified: datetime


@dataclass(frozen=True)
class ObjectPage:
    items: list[ListedObject]
    next_token: str | None = None
    truncated: bool = False


class ObjectStore(Protocol):
    """Capabilities the upload service needs from an object store.

    ``head`` returns ``None`` when the object does not exist; every other
    failure is raised unchanged for the caller to classify.
    """

    def sign_put(
        self,
        bucket: str,
        key: str,
        content_type: str,
        metadata: dict[str, str],
        max_content_length: int | None,
        ttl: int,
    ) -> str: ...

    def sign_get(self, bucket: str, key: str, ttl: int) -> str: ...

    async def head(self, bucket: str, key: str) -> ObjectHead | None: ...

    async def delete(self, bucket: str, key: str) -> None: ...

    async def list_objects(
        self,
        bucket: str,
        prefix: str,
        max_keys: int,
        continuation_token: str | None = None,
    ) -> ObjectPage: ...


def is_not_found(exc: ClientError) -> bool:
    error = exc.response.get("Error", {})
    status = exc.response.get("ResponseMetadata", {}).get("HTTPStatusCode")
    return str(error.get("Code", "")) in _NOT_FOUND_CODES or status == 404


class S3ObjectStore:
    """S3-compatible object store backed by a shared boto3 client."""

    def __init__(self, client: Any) -> None:
        self.client = client

    @classmethod
    def from_settings(cls, settings: Settings) -> "S3ObjectStore":
        session = boto3.session.Session()
        client = session.client(
            "s3",
            endpoint_url=str(settings.s3_endpoint) if settings.s3_endpoint else None,
            aws_access_key_id=settings.s3_access_key,
            aws_secret_access_key=settings.s3_secret_key,
            region_name=settings.s3_region,
            config=Config(signature_version="s3v4"),
        )
        return cls(client)

    def sign_put(
        self,
        bucket: str,
        key: str,
        content_type: str,
        metadata: dict[str, str],
        max_content_length: int | None,
        ttl: int,
    ) -> str:
        params: dict[str, Any] = {
            "Bucket": bucket,
            "Key": key,
            "ContentType": content_type,
        }
        if metadata:
            params["Metadata"] = metadata
        if max_content_length:
            params["ContentLength"] = max_content_length
        return self.client.generate_presigned_url(
            "put_object",
            Params=params,
            ExpiresIn=ttl,
        )

    def sign_get(self, bucket: str, key: str, ttl: int) -> str:
        return self.client.generate_presigned_url(
            "get_object",
            Params={"Bucket": bucket, "Key": key},
            ExpiresIn=ttl,
        )

    async def head(self, bucket: str, key: str) -> ObjectHead | None:
        def _head() -> dict[str, Any] | None:
            try:
                return self.client.head_object(Bucket=bucket, Key=key)
            except ClientError as exc:
                if is_not_found(exc):
                    return None
                raise

        response = await asyncio.to_thread(_head)
        if response is None:
            logger.debug("Object %s not found in bucket %s", key, bucket)
            return None
        return ObjectHead(
            content_type=response.get("ContentType"),
            size=response.get("ContentLength"),
            last_modified=response.get("LastModified"),
            metadata=dict(response.get("Metadata") or {}),
        )

    async def delete(self, bucket: str, key: str) -> None:
        await asyncio.to_thread(self.client.delete_object, Bucket=bucket, Key=key)

    async def list_objects(
        self,
        bucket: str,
        prefix: str,
        max_keys: int,
        continuation_token: str | None = None,
    ) -> ObjectPage:
        params: dict[str, Any] = {"Bucket": bucket, "Prefix": prefix, "MaxKeys": max_keys}
        if continuation_token:
            params["ContinuationToken"] = continuation_token

        response = await asyncio.to_thread(self.client.list_objects_v2, **params)
        items = [
            ListedObject(
                key=entry.get("Key", ""),
                size=entry.get("Size", 0),
                last_modified=entry.get("LastModified") or datetime.now(timezone.utc),
            )
            for entry in response.get("Contents", [])
        ]
        return ObjectPage(
            items=items,
            next_token=response.get("NextContinuationToken"),
            truncated=bool(response.get("IsTruncated", False)),
        )
