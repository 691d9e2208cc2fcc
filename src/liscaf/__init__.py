"""Scaffold new projects from template repositories.

liscaf renames every case-style variant of a template's base name (``acme-app``,
``AcmeApp``, ``ACME_APP``, ...) in file contents and paths, then writes the
result into a new directory or merges it into an existing one, representing
every conflict instead of overwriting anything.
"""

from __future__ import annotations

from .actions import CreateDir, FileAction, RenameOnly, WriteFile
from .commit import WriteFailure, commit
from .config import ScaffoldConfig
from .errors import (
    ConfigurationError,
    DestinationReadError,
    GitError,
    LiscafError,
    SourceReadError,
    WriteError,
)
from .manifest import ScaffoldMetadata
from .merge import ConflictRecord, MergeEngine, MergeOutcome
from .naming import DEFAULT_STYLES, CaseStyle, CaseStyleTable, derive_variants, split_words
from .report import ScaffoldReport
from .rewrite import ContentKind, classify_content, rewrite_path_segment, rewrite_text
from .scaffold import ProjectScaffolder
from .substitution import SubstitutionPlan, SubstitutionRule, build_plan
from .walker import build_actions

__all__ = [
    "DEFAULT_STYLES",
    "CaseStyle",
    "CaseStyleTable",
    "ConfigurationError",
    "ConflictRecord",
    "ContentKind",
    "CreateDir",
    "DestinationReadError",
    "FileAction",
    "GitError",
    "LiscafError",
    "MergeEngine",
    "MergeOutcome",
    "ProjectScaffolder",
    "RenameOnly",
    "ScaffoldConfig",
    "ScaffoldMetadata",
    "ScaffoldReport",
    "SourceReadError",
    "SubstitutionPlan",
    "SubstitutionRule",
    "WriteError",
    "WriteFailure",
    "WriteFile",
    "build_actions",
    "build_plan",
    "classify_content",
    "commit",
    "derive_variants",
    "rewrite_path_segment",
    "rewrite_text",
    "split_words",
]

__version__ = "0.1.0"
