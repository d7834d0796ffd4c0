"""Utilities for building storage object keys for recordings"""

import re
import secrets
import string
from datetime import datetime, timezone
from typing import Optional

SUFFIX_ALPHABET = string.ascii_lowercase + string.digits
SUFFIX_LENGTH = 8
DEFAULT_EXTENSION = "webm"

_UNSAFE_SEGMENT_RE = re.compile(r"[/\\]")


def format_timestamp(now: Optional[datetime] = None) -> str:
    """
    Sortable, filesystem-safe UTC timestamp.

    "2025-03-01T09:15:42.123Z" becomes "2025-03-01T09-15-42-123Z".
    """
    now = now or datetime.now(timezone.utc)
    now = now.astimezone(timezone.utc)
    iso = now.strftime("%Y-%m-%dT%H:%M:%S") + f".{now.microsecond // 1000:03d}Z"
    return re.sub(r"[:.]", "-", iso)


def random_suffix(length: int = SUFFIX_LENGTH) -> str:
    return "".join(secrets.choice(SUFFIX_ALPHABET) for _ in range(length))


def build_audio_key(question_id: str, extension: str = DEFAULT_EXTENSION, now: Optional[datetime] = None) -> str:
    """
    Object key for one recording: audio/{questionId}/{timestamp}_{suffix}.{ext}

    Path separators in the question id are replaced so every recording of a
    question stays under a single prefix.
    """
    safe_question_id = _UNSAFE_SEGMENT_RE.sub("_", question_id)
    return f"audio/{safe_question_id}/{format_timestamp(now)}_{random_suffix()}.{extension}"
