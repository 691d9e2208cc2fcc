"""Scaffold metadata written at the root of a generated project."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .commit import write_atomic

__all__ = ["GENERATOR", "MANIFEST_NAME", "ScaffoldMetadata", "read_manifest", "write_manifest"]


GENERATOR = "liscaf"
MANIFEST_NAME = ".liscaf.json"


class ScaffoldMetadata(BaseModel):
    """Record of where a project came from."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    project_name: str = Field(..., min_length=1, description="Name the project was generated with.")
    template_source: str = Field(..., min_length=1, description="Local path or URL of the template.")
    template_base: str = Field(..., min_length=1, description="Template name that was replaced.")
    generator: str = Field(default=GENERATOR, description="Tool that produced the project.")
    generated_at: datetime = Field(
        default_factory=lambda: datetime.now(tz=timezone.utc),
        description="Generation time in UTC.",
    )

    @field_validator("generated_at")
    @classmethod
    def _as_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


def write_manifest(destination_root: str | Path, metadata: ScaffoldMetadata) -> Path:
    """Write ``metadata`` to the manifest file, replacing any previous one."""

    path = Path(destination_root) / MANIFEST_NAME
    payload = metadata.model_dump_json(indent=2) + "\n"
    write_atomic(path, payload.encode("utf-8"), 0o644)
    return path


def read_manifest(destination_root: str | Path) -> ScaffoldMetadata:
    path = Path(destination_root) / MANIFEST_NAME
    return ScaffoldMetadata.model_validate_json(path.read_text(encoding="utf-8"))
