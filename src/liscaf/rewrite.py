"""Apply substitution plans to file contents and path segments."""

from __future__ import annotations

import codecs
import os
from enum import Enum
from pathlib import PurePosixPath

from .substitution import SubstitutionPlan

__all__ = [
    "BINARY_SNIFF_WINDOW",
    "ContentKind",
    "classify_content",
    "rewrite_path_segment",
    "rewrite_relative_path",
    "rewrite_text",
]


BINARY_SNIFF_WINDOW = 8192

_SEGMENT_SEPARATORS = tuple(sorted({"/", os.sep, os.altsep or "/"}))


class ContentKind(str, Enum):
    """Classification of a file's bytes."""

    TEXT = "text"
    BINARY = "binary"


def classify_content(data: bytes, window: int = BINARY_SNIFF_WINDOW) -> ContentKind:
    """Classify ``data`` by inspecting at most ``window`` leading bytes.

    The data is binary when the window holds a NUL byte or is not valid UTF-8.
    A multi-byte sequence cut by the window edge is not held against it.
    """

    head = data[:window]
    if b"\x00" in head:
        return ContentKind.BINARY

    decoder = codecs.getincrementaldecoder("utf-8")()
    try:
        decoder.decode(head, final=len(data) <= window)
    except UnicodeDecodeError:
        return ContentKind.BINARY
    return ContentKind.TEXT


def rewrite_text(content: bytes, plan: SubstitutionPlan) -> bytes:
    """Rewrite UTF-8 ``content`` with ``plan``.

    Callers decide whether the content is text with :func:`classify_content`;
    this function never re-derives that decision. Bytes outside matches are
    returned untouched.
    """

    return plan.apply_bytes(content)


def rewrite_path_segment(segment: str, plan: SubstitutionPlan) -> str:
    """Rewrite a single file or directory name."""

    if not segment or any(separator in segment for separator in _SEGMENT_SEPARATORS):
        msg = f"not a single path segment: {segment!r}"
        raise ValueError(msg)

    rewritten = plan.apply(segment)
    if rewritten in {"", ".", ".."} or any(separator in rewritten for separator in _SEGMENT_SEPARATORS):
        msg = f"rewriting {segment!r} produced an invalid name {rewritten!r}"
        raise ValueError(msg)
    return rewritten


def rewrite_relative_path(path: PurePosixPath, plan: SubstitutionPlan) -> PurePosixPath:
    """Rewrite every component of ``path`` independently."""

    if path.is_absolute():
        msg = f"expected a relative path, got {path}"
        raise ValueError(msg)
    return PurePosixPath(*(rewrite_path_segment(part, plan) for part in path.parts))
