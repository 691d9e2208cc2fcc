"""Planned filesystem actions produced by the tree walker."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Union

from .rewrite import ContentKind

__all__ = ["CreateDir", "FileAction", "RenameOnly", "WriteFile", "describe"]


@dataclass(frozen=True, slots=True)
class CreateDir:
    """Create ``path`` (relative to the destination root)."""

    path: PurePosixPath
    source: PurePosixPath


@dataclass(frozen=True, slots=True)
class WriteFile:
    """Write ``content`` to ``path``; the bytes may have been rewritten."""

    path: PurePosixPath
    content: bytes
    kind: ContentKind
    source: PurePosixPath
    mode: int = 0o644


@dataclass(frozen=True, slots=True)
class RenameOnly:
    """Carry ``source`` verbatim to the renamed ``path``."""

    source: PurePosixPath
    path: PurePosixPath
    content: bytes
    kind: ContentKind
    mode: int = 0o644


FileAction = Union[CreateDir, WriteFile, RenameOnly]


def describe(action: FileAction) -> str:
    """One report line for ``action``; stable for identical inputs."""

    if isinstance(action, CreateDir):
        return f"mkdir   {action.path}/"
    if isinstance(action, RenameOnly):
        return f"rename  {action.source} -> {action.path}"
    if action.path != action.source:
        return f"write   {action.path} (from {action.source})"
    return f"write   {action.path}"
