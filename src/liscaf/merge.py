"""Reconcile planned actions with an existing destination tree.

Every decision is computed before anything is written, so a dry run performs
exactly the same reads and comparisons as a real run. Conflicts are never
resolved automatically:

* text files receive inline conflict markers wrapping both versions;
* binary files keep their bytes, and the incoming bytes go to a sidecar file
  with a companion note, both under names nothing else occupies;
* a destination file that cannot be read is treated like a binary conflict
  and reported as a warning instead of aborting the merge.
"""

from __future__ import annotations

import logging
import stat
from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path, PurePosixPath
from typing import Iterable

from .actions import CreateDir, FileAction
from .errors import DestinationReadError
from .rewrite import ContentKind, classify_content

__all__ = [
    "CONFLICT_BEGIN",
    "CONFLICT_END",
    "CONFLICT_SEPARATOR",
    "NOTE_SUFFIX",
    "SIDECAR_SUFFIX",
    "ConflictRecord",
    "MergeDecision",
    "MergeEngine",
    "MergeOutcome",
    "MergeResult",
    "PendingWrite",
    "conflict_markers",
    "note_path",
    "sidecar_path",
]


LOGGER = logging.getLogger(__name__)

SIDECAR_SUFFIX = ".liscaf-incoming"
NOTE_STEM = ".liscaf-conflict"
NOTE_SUFFIX = NOTE_STEM + ".txt"

CONFLICT_BEGIN = b"<<<<<<< destination\n"
CONFLICT_SEPARATOR = b"=======\n"
CONFLICT_END = b">>>>>>> incoming\n"

NOTE_TEMPLATE = """liscaf merge conflict

file: {path}
reason: {reason}
incoming content: {sidecar}

The file at {path} was left untouched. Compare it with {sidecar}, keep the
content you want at {path}, then delete {sidecar} and this note.
"""

_NOTE_MODE = 0o644


class MergeOutcome(str, Enum):
    """Terminal state of one planned action."""

    WRITTEN = "written"
    SKIPPED = "skipped"
    CONFLICTED_TEXT = "conflicted-text"
    CONFLICTED_BINARY = "conflicted-binary"
    CONFLICTED_UNREADABLE = "conflicted-unreadable"

    @property
    def is_conflict(self) -> bool:
        return self.value.startswith("conflicted")


@dataclass(frozen=True, slots=True)
class PendingWrite:
    """A single filesystem mutation; ``content`` of ``None`` creates a directory."""

    path: PurePosixPath
    content: bytes | None = None
    mode: int | None = None

    @property
    def is_directory(self) -> bool:
        return self.content is None


@dataclass(frozen=True, slots=True)
class ConflictRecord:
    """Describes where the competing versions of ``path`` ended up."""

    path: PurePosixPath
    outcome: MergeOutcome
    reason: str
    sidecar: PurePosixPath | None = None
    note: PurePosixPath | None = None


@dataclass(frozen=True, slots=True)
class MergeDecision:
    action: FileAction
    outcome: MergeOutcome
    writes: tuple[PendingWrite, ...] = ()
    conflict: ConflictRecord | None = None


@dataclass(slots=True)
class MergeResult:
    """Decisions for every action plus the non-fatal problems met on the way."""

    decisions: list[MergeDecision] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def conflicts(self) -> list[ConflictRecord]:
        return [decision.conflict for decision in self.decisions if decision.conflict is not None]

    def counts(self) -> Counter[MergeOutcome]:
        return Counter(decision.outcome for decision in self.decisions)


def sidecar_path(path: PurePosixPath, index: int = 0) -> PurePosixPath:
    """Where the incoming bytes of a conflicted ``path`` go; ``index`` picks an alternative."""

    suffix = f"{SIDECAR_SUFFIX}.{index}" if index else SIDECAR_SUFFIX
    return path.with_name(path.name + suffix)


def note_path(path: PurePosixPath, index: int = 0) -> PurePosixPath:
    suffix = f"{NOTE_STEM}.{index}.txt" if index else NOTE_SUFFIX
    return path.with_name(path.name + suffix)


def _lacks_newline(content: bytes) -> bool:
    return bool(content) and not content.endswith(b"\n")


def _section(content: bytes) -> bytes:
    if _lacks_newline(content):
        return content + b"\n"
    return content


def conflict_markers(destination: bytes, incoming: bytes) -> bytes:
    """Wrap both versions, verbatim, in conflict markers.

    A newline is appended to a section that does not end with one so each
    marker starts its own line; no other byte is added or removed.
    """

    return b"".join(
        [
            CONFLICT_BEGIN,
            _section(destination),
            CONFLICT_SEPARATOR,
            _section(incoming),
            CONFLICT_END,
        ]
    )


def _text_reason(destination: bytes, incoming: bytes) -> str:
    sides = [
        side
        for side, content in (("destination", destination), ("incoming", incoming))
        if _lacks_newline(content)
    ]
    if not sides:
        return "text content differs"
    return f"text content differs, newline added after the {' and '.join(sides)} section"


class MergeEngine:
    """Decide how each planned action lands in ``destination_root``.

    ``destination_root`` may not exist yet; every action is then simply
    written.
    """

    def __init__(self, destination_root: str | Path) -> None:
        self.destination_root = Path(destination_root)
        self._reserved: set[PurePosixPath] = set()

    def resolve(self, actions: Iterable[FileAction]) -> MergeResult:
        planned = list(actions)
        # paths the run writes itself can never hold a sidecar or a note
        self._reserved = {action.path for action in planned}
        result = MergeResult()
        for action in planned:
            try:
                decision = self.decide(action)
            except DestinationReadError as exc:
                LOGGER.warning("%s", exc)
                result.warnings.append(f"cannot compare with existing {exc}")
                decision = self._sidecar(action, MergeOutcome.CONFLICTED_UNREADABLE, "destination file is unreadable")
            preferred = sidecar_path(action.path)
            sidecar = decision.conflict.sidecar if decision.conflict is not None else None
            if sidecar is not None and sidecar != preferred:
                result.warnings.append(f"{preferred} is taken, incoming content of {action.path} is in {sidecar}")
            LOGGER.debug("%s: %s", action.path, decision.outcome.value)
            result.decisions.append(decision)
        return result

    def decide(self, action: FileAction) -> MergeDecision:
        """Return the decision for ``action``.

        Raises :class:`~liscaf.errors.DestinationReadError` when an existing
        destination file cannot be read; :meth:`resolve` turns that into a
        conflict-safe write.
        """

        target = self.destination_root / action.path

        if isinstance(action, CreateDir):
            if target.is_dir():
                return MergeDecision(action, MergeOutcome.SKIPPED)
            return MergeDecision(action, MergeOutcome.WRITTEN, (PendingWrite(action.path),))

        if not target.exists() and not target.is_symlink():
            return MergeDecision(
                action,
                MergeOutcome.WRITTEN,
                (PendingWrite(action.path, action.content, action.mode),),
            )

        try:
            existing = target.read_bytes()
            existing_mode = stat.S_IMODE(target.stat().st_mode)
        except OSError as exc:
            raise DestinationReadError(action.path, exc.strerror or str(exc)) from exc

        if existing == action.content:
            return MergeDecision(action, MergeOutcome.SKIPPED)

        if action.kind is ContentKind.TEXT and classify_content(existing) is ContentKind.TEXT:
            merged = conflict_markers(existing, action.content)
            return MergeDecision(
                action,
                MergeOutcome.CONFLICTED_TEXT,
                (PendingWrite(action.path, merged, existing_mode),),
                ConflictRecord(action.path, MergeOutcome.CONFLICTED_TEXT, _text_reason(existing, action.content)),
            )

        return self._sidecar(action, MergeOutcome.CONFLICTED_BINARY, "binary content differs")

    def _sidecar(self, action: FileAction, outcome: MergeOutcome, reason: str) -> MergeDecision:
        if isinstance(action, CreateDir):  # pragma: no cover - directories are never read
            return MergeDecision(action, MergeOutcome.SKIPPED)

        sidecar, note = self._free_conflict_names(action.path)
        text = NOTE_TEMPLATE.format(path=action.path, sidecar=sidecar, reason=reason)
        return MergeDecision(
            action,
            outcome,
            (
                PendingWrite(sidecar, action.content, action.mode),
                PendingWrite(note, text.encode("utf-8"), _NOTE_MODE),
            ),
            ConflictRecord(action.path, outcome, reason, sidecar=sidecar, note=note),
        )

    def _occupied(self, path: PurePosixPath) -> bool:
        if path in self._reserved:
            return True
        target = self.destination_root / path
        return target.exists() or target.is_symlink()

    def _free_conflict_names(self, path: PurePosixPath) -> tuple[PurePosixPath, PurePosixPath]:
        """First sidecar and note pair that clobbers nothing, reserved for this run."""

        index = 0
        while True:
            sidecar, note = sidecar_path(path, index), note_path(path, index)
            if not (self._occupied(sidecar) or self._occupied(note)):
                break
            index += 1
        if index:
            LOGGER.warning("%s is taken, using %s", sidecar_path(path), sidecar)
        self._reserved.update((sidecar, note))
        return sidecar, note
