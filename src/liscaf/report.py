"""Human readable summary of a scaffold run."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path

from .actions import FileAction, describe
from .commit import WriteFailure
from .merge import ConflictRecord, MergeDecision, MergeOutcome, MergeResult
from .substitution import SubstitutionRule

__all__ = ["ScaffoldReport"]


@dataclass(slots=True)
class ScaffoldReport:
    """Everything a run planned, decided, and (unless dry) did.

    :attr:`warnings` holds every non-fatal problem of the run, including those
    the merge reported. :meth:`render` only uses values derived from the
    inputs, so two runs over identical inputs render identical text.
    """

    project: str
    template_base: str
    destination: Path
    dry_run: bool
    rules: tuple[SubstitutionRule, ...] = ()
    merge: MergeResult = field(default_factory=MergeResult)
    warnings: list[str] = field(default_factory=list)
    failures: list[WriteFailure] = field(default_factory=list)
    manifest: Path | None = None

    @property
    def decisions(self) -> list[MergeDecision]:
        return self.merge.decisions

    @property
    def actions(self) -> list[FileAction]:
        return [decision.action for decision in self.decisions]

    @property
    def conflicts(self) -> list[ConflictRecord]:
        return self.merge.conflicts

    @property
    def ok(self) -> bool:
        return not self.failures

    def counts(self) -> Counter[MergeOutcome]:
        return self.merge.counts()

    def summary(self) -> str:
        counts = self.counts()
        parts = [f"{counts[outcome]} {outcome.value}" for outcome in MergeOutcome if counts[outcome]]
        if self.failures:
            parts.append(f"{len(self.failures)} failed")
        return ", ".join(parts) or "nothing to do"

    def render(self) -> str:
        mode = " (dry run)" if self.dry_run else ""
        lines = [f"{self.template_base} -> {self.project} in {self.destination}{mode}"]

        lines.append("rules:")
        lines.extend(f"  {rule}" for rule in self.rules)
        if not self.rules:
            lines.append("  (none)")

        lines.append("actions:")
        described = [describe(decision.action) for decision in self.decisions]
        width = max((len(text) for text in described), default=0)
        for text, decision in zip(described, self.decisions):
            lines.append(f"  {text.ljust(width)}  [{decision.outcome.value}]")

        if self.conflicts:
            lines.append("conflicts:")
            for conflict in self.conflicts:
                if conflict.sidecar is None:
                    lines.append(f"  {conflict.path}: {conflict.reason}, markers inline")
                else:
                    lines.append(
                        f"  {conflict.path}: {conflict.reason}, incoming in {conflict.sidecar}"
                        f" (see {conflict.note})"
                    )

        if self.warnings:
            lines.append("warnings:")
            lines.extend(f"  {warning}" for warning in self.warnings)

        if self.failures:
            lines.append("failures:")
            lines.extend(f"  {failure}" for failure in self.failures)

        lines.append(f"summary: {self.summary()}")
        return "\n".join(lines) + "\n"
