import re
import time
from collections.abc import Callable
from pathlib import PurePosixPath
from uuid import uuid4

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]")
_SEPARATOR = "-"


def sanitize_filename(filename: str) -> str:
    return _UNSAFE_CHARS.sub("_", filename) or "file"


def _now_millis() -> int:
    return time.time_ns() // 1_000_000


class KeyGenerator:
    """Builds object keys of the form ``{timestamp}-{id}-{filename}``.

    The id never contains the separator, so the first two dash-delimited
    segments of a generated key are always timestamp and id and everything
    after them is the sanitized filename.
    """

    def __init__(self, clock: Callable[[], int] = _now_millis) -> None:
        self._clock = clock

    def generate_file_id(self) -> str:
        return uuid4().hex

    def generate_key(self, filename: str, file_id: str | None = None) -> str:
        safe_name = sanitize_filename(filename)
        if file_id is None:
            file_id = self.generate_file_id()
        else:
            file_id = sanitize_filename(file_id).replace(_SEPARATOR, "_")
        return f"{self._clock()}{_SEPARATOR}{file_id}{_SEPARATOR}{safe_name}"

    @staticmethod
    def filename_from_key(key: str) -> str:
        # Best-effort: keys written by other tools are returned as-is.
        name = PurePosixPath(key).name or key
        parts = name.split(_SEPARATOR, 2)
        if len(parts) == 3 and parts[0].isdigit() and parts[1] and parts[2]:
            return parts[2]
        return name
