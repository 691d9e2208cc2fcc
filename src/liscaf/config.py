"""Configuration shared by the scaffolder and the CLI."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from .errors import ConfigurationError
from .manifest import ScaffoldMetadata
from .naming import slugify

__all__ = ["DEFAULT_TEMPLATE_BASE", "ScaffoldConfig", "is_remote_source"]


DEFAULT_TEMPLATE_BASE = "acme-app"

_REMOTE_SOURCE = re.compile(r"^(?:https?://|ssh://|file://|git@[^:]+:)")
_PATH_CHARACTERS = ("/", "\\", "\x00")


def is_remote_source(source: str) -> bool:
    """Whether ``source`` must be cloned rather than read from disk."""

    return bool(_REMOTE_SOURCE.match(source))


def _normalize_name(value: str, label: str) -> str:
    normalized = " ".join(value.split())
    if not normalized:
        raise ConfigurationError(f"{label} must not be empty")
    for character in _PATH_CHARACTERS:
        if character in normalized:
            raise ConfigurationError(f"{label} {value!r} must not contain {character!r}")
    return normalized


@dataclass(slots=True)
class ScaffoldConfig:
    """Everything a scaffold run needs to know.

    Attributes
    ----------
    name:
        The new project name, whitespace normalised. Every case-style variant
        of :attr:`template_base` is replaced by the matching variant of it.
    slug:
        Filesystem friendly version of :attr:`name`, used for the default
        destination directory.
    source:
        Local template directory or a remote repository URL.
    template_base:
        The name used throughout the template.
    destination:
        Where the project is written. An existing directory is merged into.
    dry_run:
        Compute and report every action without writing anything.
    init_repository:
        Initialise a git repository in a destination that has none.
    """

    name: str
    slug: str
    source: str
    template_base: str
    destination: Path
    dry_run: bool = False
    init_repository: bool = True

    @classmethod
    def from_name(
        cls,
        name: str,
        *,
        source: str,
        template_base: str = DEFAULT_TEMPLATE_BASE,
        destination: str | Path | None = None,
        dry_run: bool = False,
        init_repository: bool = True,
    ) -> "ScaffoldConfig":
        """Validate user input and derive the remaining settings.

        Raises :class:`~liscaf.errors.ConfigurationError` for empty names, names
        containing path separators, a missing source, or a destination that is
        not a directory.
        """

        project_name = _normalize_name(name, "project name")
        base = _normalize_name(template_base, "template base name")

        slug = slugify(project_name)
        if not slug:
            raise ConfigurationError(f"project name {name!r} has no usable characters")

        source = source.strip()
        if not source:
            raise ConfigurationError("a template source is required")
        if not is_remote_source(source):
            if not Path(source).expanduser().is_dir():
                raise ConfigurationError(f"template source {source!r} is neither a URL nor a directory")
            source = str(Path(source).expanduser().resolve())

        target = Path(destination) if destination is not None else Path.cwd() / slug
        target = target.expanduser().resolve()
        if target.exists() and not target.is_dir():
            raise ConfigurationError(f"destination {target} exists and is not a directory")

        return cls(
            name=project_name,
            slug=slug,
            source=source,
            template_base=base,
            destination=target,
            dry_run=dry_run,
            init_repository=init_repository,
        )

    @property
    def is_remote(self) -> bool:
        return is_remote_source(self.source)

    def metadata(self, generated_at: datetime | None = None) -> ScaffoldMetadata:
        """Return the manifest describing this run."""

        values: dict[str, object] = {
            "project_name": self.name,
            "template_source": self.source,
            "template_base": self.template_base,
        }
        if generated_at is not None:
            values["generated_at"] = generated_at
        return ScaffoldMetadata(**values)
