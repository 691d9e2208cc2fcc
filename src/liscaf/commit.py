"""Materialise merge decisions on disk."""

from __future__ import annotations

import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Iterable

from .errors import WriteError
from .merge import MergeDecision, PendingWrite

__all__ = ["WriteFailure", "commit", "write_atomic"]


LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class WriteFailure:
    path: PurePosixPath
    message: str

    def __str__(self) -> str:
        return f"{self.path}: {self.message}"


def write_atomic(target: Path, content: bytes, mode: int | None = None) -> None:
    """Write ``content`` to ``target`` through a temporary sibling file.

    The previous file, if any, stays in place until :func:`os.replace` swaps
    the new one in.
    """

    handle, temporary = tempfile.mkstemp(prefix=f".{target.name}.", suffix=".tmp", dir=target.parent)
    try:
        with os.fdopen(handle, "wb") as stream:
            stream.write(content)
        if mode is not None:
            os.chmod(temporary, mode)
        os.replace(temporary, target)
    except BaseException:
        Path(temporary).unlink(missing_ok=True)
        raise


def _apply(root: Path, write: PendingWrite) -> None:
    target = root / write.path
    try:
        if write.is_directory:
            target.mkdir(parents=True, exist_ok=True)
        else:
            write_atomic(target, write.content or b"", write.mode)
    except OSError as exc:
        raise WriteError(write.path, exc.strerror or str(exc)) from exc


def commit(decisions: Iterable[MergeDecision], destination_root: str | Path) -> list[WriteFailure]:
    """Apply every pending write below ``destination_root``.

    Writes happen in decision order, so directories exist before their
    children. A failing write is recorded and the remaining ones are still
    attempted.
    """

    root = Path(destination_root)
    failures: list[WriteFailure] = []
    try:
        root.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        return [WriteFailure(PurePosixPath("."), exc.strerror or str(exc))]

    for decision in decisions:
        for write in decision.writes:
            try:
                _apply(root, write)
            except WriteError as exc:
                LOGGER.error("%s", exc)
                failures.append(WriteFailure(write.path, exc.reason))
            else:
                LOGGER.debug("wrote %s", write.path)
    return failures
