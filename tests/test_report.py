from __future__ import annotations

from pathlib import Path, PurePosixPath

from liscaf.actions import WriteFile
from liscaf.merge import MergeEngine, MergeOutcome
from liscaf.report import ScaffoldReport
from liscaf.rewrite import ContentKind


def _write(path: str, content: bytes) -> WriteFile:
    relative = PurePosixPath(path)
    return WriteFile(relative, content, ContentKind.TEXT, relative)


def test_report_reads_counts_and_conflicts_from_merge(make_tree):
    destination = make_tree("dest", {"same.txt": "same\n", "notes.txt": "old"})
    merge = MergeEngine(destination).resolve(
        [_write("same.txt", b"same\n"), _write("notes.txt", b"new\n"), _write("fresh.txt", b"x\n")]
    )

    report = ScaffoldReport("my-cool-app", "acme-app", Path("/out"), dry_run=True, merge=merge)

    assert report.decisions is merge.decisions
    assert report.counts() == merge.counts()
    assert report.conflicts == merge.conflicts
    assert report.counts()[MergeOutcome.CONFLICTED_TEXT] == 1
    assert report.summary() == "1 written, 1 skipped, 1 conflicted-text"


def test_render_explains_added_newlines(make_tree):
    destination = make_tree("dest", {"notes.txt": "old"})
    merge = MergeEngine(destination).resolve([_write("notes.txt", b"new\n")])

    rendered = ScaffoldReport("my-cool-app", "acme-app", Path("/out"), dry_run=True, merge=merge).render()

    assert (
        "  notes.txt: text content differs, newline added after the destination section, markers inline"
        in rendered
    )


def test_empty_report():
    report = ScaffoldReport("my-cool-app", "acme-app", Path("/out"), dry_run=False)

    assert report.summary() == "nothing to do"
    assert report.render() == (
        "acme-app -> my-cool-app in /out\n"
        "rules:\n"
        "  (none)\n"
        "actions:\n"
        "summary: nothing to do\n"
    )
