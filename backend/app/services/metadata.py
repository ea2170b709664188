"""Mapping between :class:`FileMetadata` and S3 user-metadata headers.

S3 stores user metadata as flat ``x-amz-meta-*`` string headers. boto3 adds and
strips that prefix itself, so the encoded mapping uses the bare names below.
Values must be plain ASCII on the wire, which is why free-text fields are
percent-encoded and tags are stored as an ASCII-escaped JSON array.
"""

import json
from collections.abc import Mapping
from urllib.parse import quote, unquote

from app.core.errors import AppError
from app.schemas.metadata import FileMetadata

HEADER_PREFIX = "x-amz-meta-"

USER_ID = "user-id"
ORIGINAL_FILENAME = "original-filename"
TAGS = "tags"
IS_PUBLIC = "is-public"
DESCRIPTION = "description"

METADATA_HEADERS = (USER_ID, ORIGINAL_FILENAME, TAGS, IS_PUBLIC, DESCRIPTION)


class MetadataCodec:
    def encode(self, metadata: FileMetadata) -> dict[str, str]:
        headers: dict[str, str] = {}
        if metadata.user_id is not None:
            headers[USER_ID] = metadata.user_id
        if metadata.original_filename is not None:
            headers[ORIGINAL_FILENAME] = quote(metadata.original_filename, safe="")
        if metadata.tags is not None:
            headers[TAGS] = json.dumps(list(metadata.tags))
        if metadata.is_public is not None:
            headers[IS_PUBLIC] = "true" if metadata.is_public else "false"
        if metadata.description is not None:
            headers[DESCRIPTION] = quote(metadata.description, safe="")
        return headers

    def decode(self, headers: Mapping[str, str]) -> FileMetadata:
        normalized = {_strip_prefix(name): value for name, value in headers.items()}

        values: dict[str, object] = {}
        if USER_ID in normalized:
            values["user_id"] = normalized[USER_ID]
        if ORIGINAL_FILENAME in normalized:
            values["original_filename"] = unquote(normalized[ORIGINAL_FILENAME])
        if TAGS in normalized:
            values["tags"] = _decode_tags(normalized[TAGS])
        if IS_PUBLIC in normalized:
            values["is_public"] = normalized[IS_PUBLIC].strip().lower() == "true"
        if DESCRIPTION in normalized:
            values["description"] = unquote(normalized[DESCRIPTION])
        return FileMetadata.model_validate(values)

    @staticmethod
    def has_schema_fields(headers: Mapping[str, str]) -> bool:
        return any(_strip_prefix(name) in METADATA_HEADERS for name in headers)


def _strip_prefix(name: str) -> str:
    name = name.lower()
    if name.startswith(HEADER_PREFIX):
        return name[len(HEADER_PREFIX):]
    return name


def _decode_tags(raw: str) -> list[str]:
    try:
        tags = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise AppError.validation(
            "Malformed metadata: tags header is not valid JSON",
            details=[{"path": TAGS, "message": str(exc)}],
        ) from exc
    if not isinstance(tags, list) or not all(isinstance(tag, str) for tag in tags):
        raise AppError.validation(
            "Malformed metadata: tags header must be a JSON array of strings",
            details=[{"path": TAGS, "message": f"unexpected value {raw!r}"}],
        )
    return tags
