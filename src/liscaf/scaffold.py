"""Project scaffolding from an existing template repository."""

from __future__ import annotations

import logging
import tempfile
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path, PurePosixPath
from typing import Callable, Iterator

from .commit import WriteFailure, commit
from .config import ScaffoldConfig
from .errors import GitError
from .git import GitClient
from .manifest import MANIFEST_NAME, write_manifest
from .merge import MergeEngine
from .naming import DEFAULT_STYLES, CaseStyleTable
from .report import ScaffoldReport
from .substitution import SubstitutionPlan, build_plan
from .walker import VCS_METADATA_DIR, build_actions

__all__ = ["ProjectScaffolder"]


LOGGER = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


class ProjectScaffolder:
    """Create or update a project from a template.

    The run is split in two halves. Planning (substitution plan, tree walk,
    merge decisions) only reads; it is identical for dry and real runs and any
    fatal error surfaces there. Committing then applies the decisions, writes
    the manifest, and initialises a repository.
    """

    def __init__(
        self,
        git: GitClient | None = None,
        *,
        styles: CaseStyleTable = DEFAULT_STYLES,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.git = git or GitClient()
        self.styles = styles
        self.clock = clock

    def plan(self, config: ScaffoldConfig) -> SubstitutionPlan:
        return build_plan(config.template_base, config.name, self.styles)

    def plan_warnings(self, config: ScaffoldConfig, plan: SubstitutionPlan) -> list[str]:
        """Describe the ways ``plan`` falls short of a clean style-by-style rename."""

        warnings = []
        if plan.degraded:
            warnings.append(
                f"{config.template_base!r} cannot be mapped onto {config.name!r} style by style;"
                " only the literal name is replaced"
            )
        for produced, target in plan.collisions():
            warnings.append(
                f"{produced.replacement!r} reintroduces {target.pattern!r};"
                " running liscaf again on the result would rewrite it twice"
            )
        for warning in warnings:
            LOGGER.warning("%s", warning)
        return warnings

    @contextmanager
    def checkout(self, config: ScaffoldConfig) -> Iterator[Path]:
        """Yield a local directory holding the template."""

        if not config.is_remote:
            yield Path(config.source)
            return

        with tempfile.TemporaryDirectory(prefix="liscaf-") as workspace:
            target = Path(workspace) / "template"
            self.git.clone(config.source, target)
            self.git.remove_metadata(target)
            yield target

    def run(self, config: ScaffoldConfig) -> ScaffoldReport:
        """Scaffold ``config.name`` into ``config.destination``."""

        plan = self.plan(config)
        warnings = self.plan_warnings(config, plan)
        with self.checkout(config) as source_root:
            actions = build_actions(
                source_root,
                plan,
                exclude=(VCS_METADATA_DIR, MANIFEST_NAME),
                warnings=warnings,
            )

        destination = config.destination
        merge = MergeEngine(destination).resolve(actions)
        report = ScaffoldReport(
            project=config.name,
            template_base=config.template_base,
            destination=destination,
            dry_run=config.dry_run,
            rules=plan.rules,
            merge=merge,
            warnings=[*warnings, *merge.warnings],
        )
        if config.dry_run:
            return report

        had_repository = (destination / VCS_METADATA_DIR).exists()
        report.failures = commit(merge.decisions, destination)
        if report.failures:
            LOGGER.error("%d writes failed; manifest not written", len(report.failures))
            return report

        try:
            report.manifest = write_manifest(destination, config.metadata(self.clock()))
        except OSError as exc:
            report.failures.append(WriteFailure(PurePosixPath(MANIFEST_NAME), exc.strerror or str(exc)))
            return report

        if config.init_repository and not had_repository:
            try:
                self.git.init_repository(destination)
            except GitError as exc:
                LOGGER.warning("%s", exc)
                report.warnings.append(f"repository not initialised: {exc}")
        return report
