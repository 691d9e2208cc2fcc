"""Thin wrapper around the ``git`` executable."""

from __future__ import annotations

import logging
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path

from .errors import GitError

__all__ = ["DEFAULT_COMMIT_MESSAGE", "GitClient"]


LOGGER = logging.getLogger(__name__)

DEFAULT_COMMIT_MESSAGE = "Initial commit from template (liscaf)"


@dataclass(slots=True)
class GitClient:
    """Run the handful of git commands a scaffold needs.

    Attributes
    ----------
    executable:
        Name or path of the git binary.
    timeout:
        Seconds allowed for a single git command.
    """

    executable: str = "git"
    timeout: float = 300.0

    def _run(self, *args: str, cwd: Path | None = None) -> str:
        command = [self.executable, *args]
        LOGGER.debug("running %s", " ".join(command))
        try:
            result = subprocess.run(
                command,
                capture_output=True,
                text=True,
                cwd=cwd,
                timeout=self.timeout,
                check=False,
            )
        except FileNotFoundError as exc:
            raise GitError(f"{self.executable} executable not found") from exc
        except subprocess.TimeoutExpired as exc:
            raise GitError(f"git {args[0]} timed out after {self.timeout:g}s") from exc

        if result.returncode != 0:
            detail = result.stderr.strip() or result.stdout.strip()
            raise GitError(f"git {args[0]} failed with code {result.returncode}: {detail}")
        return result.stdout

    def clone(self, url: str, target: Path, *, depth: int | None = 1) -> Path:
        """Clone ``url`` into ``target``; a shallow clone unless ``depth`` is None."""

        args = ["clone"]
        if depth is not None:
            args += ["--depth", str(depth)]
        self._run(*args, "--", url, str(target))
        LOGGER.info("cloned %s into %s", url, target)
        return target

    def remove_metadata(self, path: Path) -> bool:
        """Delete the ``.git`` directory below ``path``; returns whether one existed."""

        metadata = path / ".git"
        try:
            if metadata.is_dir():
                shutil.rmtree(metadata)
                return True
            if metadata.exists():
                # worktrees and submodules use a .git file
                metadata.unlink()
                return True
        except OSError as exc:
            raise GitError(f"cannot remove {metadata}: {exc.strerror or exc}") from exc
        LOGGER.warning(".git not found in %s", path)
        return False

    def init_repository(self, path: Path, message: str = DEFAULT_COMMIT_MESSAGE) -> None:
        """Create a repository at ``path`` and commit everything in it."""

        self._run("init", cwd=path)
        self._run("add", "--all", cwd=path)
        self._run("commit", "--quiet", "-m", message, cwd=path)
        LOGGER.info("initialised repository in %s", path)
