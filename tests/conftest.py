"""Shared fixtures for the grader tests."""

import io
import os
import struct
import tempfile
import zipfile
from typing import Callable, Dict, List, Optional

# Keep test runs from writing logs into the working tree
os.environ.setdefault("GRADER_LOG_FILE", os.path.join(tempfile.gettempdir(), "canvas_grader_tests.log"))

import pytest

from core.models import Attachment, Submission, UserProfile, UserSubmission


def make_profile(user_id: int, sortable_name: str) -> UserProfile:
    last, _, first = sortable_name.partition(", ")
    return UserProfile(id=user_id, name=f"{first} {last}".strip(), sortable_name=sortable_name)


def make_submission(
    submission_id: int,
    user_id: Optional[int],
    urls: Optional[List[str]] = None,
) -> Submission:
    attachments = [Attachment(url=url, filename=url.rsplit("/", 1)[-1]) for url in (urls or [])]
    return Submission(id=submission_id, user_id=user_id, attachments=attachments)


def make_entry(user_id: int, sortable_name: str, urls: Optional[List[str]] = None) -> UserSubmission:
    return UserSubmission(
        submission=make_submission(1000 + user_id, user_id, urls),
        user_profile=make_profile(user_id, sortable_name),
    )


def build_zip(files: Dict[str, bytes | str]) -> bytes:
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        for name, content in files.items():
            archive.writestr(name, content)
    return buffer.getvalue()


@pytest.fixture
def zip_bytes() -> Callable[[Dict[str, bytes | str]], bytes]:
    """Returns a builder for in-memory ZIP archives."""
    return build_zip


def patch_zip_headers(data: bytes, flag_bits: int = 0, compress_type: Optional[int] = None) -> bytes:
    """Rewrites the flag and compression fields of every local and central directory header."""
    patched = bytearray(data)
    for signature, flags_at, method_at in ((b"PK\x03\x04", 6, 8), (b"PK\x01\x02", 8, 10)):
        start = patched.find(signature)
        while start != -1:
            if flag_bits:
                flags = struct.unpack_from("<H", patched, start + flags_at)[0] | flag_bits
                struct.pack_into("<H", patched, start + flags_at, flags)
            if compress_type is not None:
                struct.pack_into("<H", patched, start + method_at, compress_type)
            start = patched.find(signature, start + 4)
    return bytes(patched)
