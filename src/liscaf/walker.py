"""Walk a template tree and plan the renamed copy of every entry."""

from __future__ import annotations

import logging
import os
import stat
from pathlib import Path, PurePosixPath
from typing import Iterable

from .actions import CreateDir, FileAction, RenameOnly, WriteFile
from .errors import SourceReadError
from .rewrite import ContentKind, classify_content, rewrite_path_segment, rewrite_text
from .substitution import SubstitutionPlan

__all__ = ["VCS_METADATA_DIR", "build_actions"]


LOGGER = logging.getLogger(__name__)

VCS_METADATA_DIR = ".git"


def _claim(name: str, claimed: set[str], directory: PurePosixPath, warnings: list[str]) -> str:
    candidate = name
    counter = 1
    while candidate in claimed:
        candidate = f"{name}_{counter}"
        counter += 1
    if candidate != name:
        LOGGER.warning("%s already planned in this directory, using %s", name, candidate)
        warnings.append(f"{directory / name}: name already planned, written as {candidate}")
    claimed.add(candidate)
    return candidate


def _read_error(path: str | os.PathLike[str], exc: OSError) -> SourceReadError:
    return SourceReadError(os.fspath(path), exc.strerror or str(exc))


def _plan_file(
    entry: os.DirEntry[str],
    source: PurePosixPath,
    destination: PurePosixPath,
    plan: SubstitutionPlan,
) -> FileAction:
    try:
        data = Path(entry.path).read_bytes()
        mode = stat.S_IMODE(entry.stat().st_mode)
    except OSError as exc:
        raise _read_error(entry.path, exc) from exc

    kind = classify_content(data)
    content = rewrite_text(data, plan) if kind is ContentKind.TEXT else data
    if content == data and destination != source:
        return RenameOnly(source, destination, content, kind, mode)
    return WriteFile(destination, content, kind, source, mode)


def _walk(
    directory: Path,
    source: PurePosixPath,
    destination: PurePosixPath,
    plan: SubstitutionPlan,
    excluded: frozenset[str],
    actions: list[FileAction],
    warnings: list[str],
) -> None:
    try:
        with os.scandir(directory) as iterator:
            entries = sorted(iterator, key=lambda entry: entry.name)
    except OSError as exc:
        raise _read_error(directory, exc) from exc

    claimed: set[str] = set()
    for entry in entries:
        if entry.name in excluded:
            LOGGER.debug("skipping %s", source / entry.name)
            continue

        entry_source = source / entry.name
        try:
            is_link = entry.is_symlink()
            is_dir = entry.is_dir()
            is_file = entry.is_file()
        except OSError as exc:
            raise _read_error(entry.path, exc) from exc

        if is_link and is_dir:
            LOGGER.warning("not following directory symlink %s", entry_source)
            warnings.append(f"{entry_source}: directory symlink not followed, its contents are not copied")
            continue
        if not (is_dir or is_file):
            LOGGER.warning("skipping %s: not a regular file or directory", entry_source)
            warnings.append(f"{entry_source}: not a regular file or directory, skipped")
            continue

        name = _claim(rewrite_path_segment(entry.name, plan), claimed, destination, warnings)
        entry_destination = destination / name
        if is_dir:
            actions.append(CreateDir(entry_destination, entry_source))
            _walk(Path(entry.path), entry_source, entry_destination, plan, frozenset(), actions, warnings)
        else:
            actions.append(_plan_file(entry, entry_source, entry_destination, plan))


def build_actions(
    source_root: str | os.PathLike[str],
    plan: SubstitutionPlan,
    *,
    exclude: Iterable[str] = (VCS_METADATA_DIR,),
    warnings: list[str] | None = None,
) -> list[FileAction]:
    """Plan the rewritten copy of ``source_root`` without writing anything.

    Entries are visited depth first in lexicographic order, so every
    :class:`~liscaf.actions.CreateDir` precedes the actions for its children
    and repeated runs over the same tree return identical lists. Names in
    ``exclude`` are skipped at the top level only. Entries that are left out
    or renamed to avoid a clash are described in ``warnings`` when given.

    Raises :class:`~liscaf.errors.SourceReadError` when any part of the tree
    cannot be read.
    """

    root = Path(source_root)
    if not root.is_dir():
        raise SourceReadError(os.fspath(root), "not a directory")

    actions: list[FileAction] = []
    _walk(
        root,
        PurePosixPath(),
        PurePosixPath(),
        plan,
        frozenset(exclude),
        actions,
        warnings if warnings is not None else [],
    )
    LOGGER.debug("planned %d actions from %s", len(actions), root)
    return actions
