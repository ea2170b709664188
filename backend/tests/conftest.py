import os
import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Ensure project root is on sys.path
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

os.environ["ENV"] = "test"
os.environ["DEBUG"] = "false"
os.environ["JWT_SECRET_KEY"] = "test-secret"
os.environ["S3_ACCESS_KEY"] = "test"
os.environ["S3_SECRET_KEY"] = "test"
os.environ["S3_REGION"] = "us-east-1"
os.environ["S3_BUCKET_NAME"] = "test-bucket"
os.environ["S3_PREFIX"] = "test-uploads/"
os.environ["MAX_FILE_SIZE_MB"] = "100"
os.environ["LOG_JSON"] = "false"

from app.core.config import get_settings  # noqa: E402
from app.core.security import create_access_token  # noqa: E402
from app.services.object_store import ListedObject, ObjectHead, ObjectPage  # noqa: E402

BUCKET = "test-bucket"
PREFIX = "test-uploads/"


class InMemoryObjectStore:
    """Object store double that keeps objects in a dict and records every call."""

    def __init__(self) -> None:
        self.objects: dict[str, ObjectHead] = {}
        self.calls: list[tuple] = []
        self.fail_on: set[str] = set()

    def put(
        self,
        key: str,
        content_type: str = "image/jpeg",
        size: int = 1024,
        metadata: dict[str, str] | None = None,
        last_modified: datetime | None = None,
    ) -> None:
        self.objects[key] = ObjectHead(
            content_type=content_type,
            size=size,
            last_modified=last_modified or datetime(2024, 1, 1, tzinfo=timezone.utc),
            metadata=metadata or {},
        )

    def operations(self) -> list[str]:
        return [call[0] for call in self.calls]

    def _record(self, operation: str, *args) -> None:
        self.calls.append((operation, *args))
        if operation in self.fail_on:
            raise RuntimeError(f"{operation} exploded")

    def sign_put(self, bucket, key, content_type, metadata, max_content_length, ttl):
        self._record("sign_put", bucket, key, content_type, dict(metadata), max_content_length, ttl)
        return f"https://example.com/put/{bucket}/{key}?expires={ttl}"

    def sign_get(self, bucket, key, ttl):
        self._record("sign_get", bucket, key, ttl)
        return f"https://example.com/get/{bucket}/{key}?expires={ttl}"

    async def head(self, bucket, key):
        self._record("head", bucket, key)
        return self.objects.get(key)

    async def delete(self, bucket, key):
        self._record("delete", bucket, key)
        self.objects.pop(key, None)

    async def list_objects(self, bucket, prefix, max_keys, continuation_token=None):
        self._record("list_objects", bucket, prefix, max_keys, continuation_token)
        keys = sorted(key for key in self.objects if key.startswith(prefix))
        start = int(continuation_token or 0)
        chunk = keys[start : start + max_keys]
        truncated = start + max_keys < len(keys)
        return ObjectPage(
            items=[
                ListedObject(
                    key=key,
                    size=self.objects[key].size or 0,
                    last_modified=self.objects[key].last_modified,
                )
                for key in chunk
            ],
            next_token=str(start + max_keys) if truncated else None,
            truncated=truncated,
        )


@pytest.fixture
def settings():
    get_settings.cache_clear()
    return get_settings()


@pytest.fixture
def store() -> InMemoryObjectStore:
    return InMemoryObjectStore()


@pytest.fixture
def app_instance(settings, store):
    from app.main import create_app

    return create_app(settings=settings, store=store)


@pytest_asyncio.fixture
async def client(app_instance):
    transport = ASGITransport(app=app_instance)
    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client


@pytest.fixture
def auth_headers(settings) -> dict[str, str]:
    token = create_access_token(subject="test-user-123")
    return {"Authorization": f"Bearer {token}"}
