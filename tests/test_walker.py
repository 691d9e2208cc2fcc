from __future__ import annotations

import os
from pathlib import Path, PurePosixPath

import pytest

from liscaf.actions import CreateDir, RenameOnly, WriteFile, describe
from liscaf.errors import SourceReadError
from liscaf.rewrite import ContentKind
from liscaf.substitution import SubstitutionPlan, build_plan
from liscaf.walker import build_actions


@pytest.fixture()
def plan() -> SubstitutionPlan:
    return build_plan("acme-app", "my-cool-app")


def _paths(actions) -> list[str]:
    return [str(action.path) for action in actions]


def test_actions_are_lexicographic_and_parent_first(make_tree, plan: SubstitutionPlan):
    source = make_tree(
        "template",
        {
            "b.txt": "beta\n",
            "docs/c.md": "see acme-app\n",
            "a.txt": "alpha\n",
        },
    )

    actions = build_actions(source, plan)

    assert _paths(actions) == ["a.txt", "b.txt", "docs", "docs/c.md"]
    assert [type(action) for action in actions] == [WriteFile, WriteFile, CreateDir, WriteFile]
    assert actions[3].content == b"see my-cool-app\n"


def test_actions_are_reproducible(make_tree, plan: SubstitutionPlan):
    source = make_tree(
        "template",
        {
            "zeta/acme_app.py": "import acme_app\n",
            "alpha/beta/gamma.txt": "AcmeApp\n",
            "alpha/logo.bin": b"\x00\x01\x02",
            "README.md": "# Acme App\n",
        },
    )

    first = build_actions(source, plan)
    second = build_actions(source, plan)

    assert first == second
    assert [describe(action) for action in first] == [describe(action) for action in second]


def test_every_directory_precedes_its_children(make_tree, plan: SubstitutionPlan):
    source = make_tree(
        "template",
        {
            "a/b/c/d.txt": "deep\n",
            "a/b/e.txt": "mid\n",
            "a/f.txt": "top\n",
            "g": None,
        },
    )

    created: set[PurePosixPath] = {PurePosixPath(".")}
    for action in build_actions(source, plan):
        assert action.path.parent in created
        if isinstance(action, CreateDir):
            created.add(action.path)
    assert PurePosixPath("g") in created


def test_renamed_entries(make_tree, plan: SubstitutionPlan):
    source = make_tree(
        "template",
        {
            "acme-app-config/settings.toml": 'name = "acme-app"\n',
            "acme_app.png": b"\x00\x01",
            "logo.png": b"\x89PNG\x00acme-app",
        },
    )

    actions = build_actions(source, plan)

    assert actions == [
        CreateDir(PurePosixPath("my-cool-app-config"), PurePosixPath("acme-app-config")),
        WriteFile(
            PurePosixPath("my-cool-app-config/settings.toml"),
            b'name = "my-cool-app"\n',
            ContentKind.TEXT,
            PurePosixPath("acme-app-config/settings.toml"),
            actions[1].mode,
        ),
        RenameOnly(
            PurePosixPath("acme_app.png"),
            PurePosixPath("my_cool_app.png"),
            b"\x00\x01",
            ContentKind.BINARY,
            actions[2].mode,
        ),
        WriteFile(
            PurePosixPath("logo.png"),
            b"\x89PNG\x00acme-app",
            ContentKind.BINARY,
            PurePosixPath("logo.png"),
            actions[3].mode,
        ),
    ]


def test_version_control_directory_is_skipped_at_root_only(make_tree, plan: SubstitutionPlan):
    source = make_tree(
        "template",
        {
            ".git/HEAD": "ref: refs/heads/main\n",
            "vendor/.git/HEAD": "ref: refs/heads/main\n",
            ".gitignore": "build/\n",
        },
    )

    assert _paths(build_actions(source, plan)) == [
        ".gitignore",
        "vendor",
        "vendor/.git",
        "vendor/.git/HEAD",
    ]


def test_colliding_names_are_disambiguated(make_tree, plan: SubstitutionPlan):
    source = make_tree("template", {"acme-app.txt": "one\n", "my-cool-app.txt": "two\n"})

    actions = build_actions(source, plan)

    assert _paths(actions) == ["my-cool-app.txt", "my-cool-app.txt_1"]
    assert [action.content for action in actions] == [b"one\n", b"two\n"]


def test_file_mode_is_recorded(make_tree, plan: SubstitutionPlan):
    source = make_tree("template", {"run.sh": "#!/bin/sh\necho acme-app\n"})
    os.chmod(source / "run.sh", 0o755)

    (action,) = build_actions(source, plan)

    assert action.mode == 0o755


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unavailable")
def test_directory_symlinks_are_not_followed(make_tree, plan: SubstitutionPlan):
    source = make_tree("template", {"real/file.txt": "x\n"})
    os.symlink(source / "real", source / "link", target_is_directory=True)

    assert _paths(build_actions(source, plan)) == ["real", "real/file.txt"]


def test_missing_source_root(tmp_path: Path, plan: SubstitutionPlan):
    with pytest.raises(SourceReadError):
        build_actions(tmp_path / "missing", plan)


def test_unreadable_source_file_aborts(make_tree, plan: SubstitutionPlan, monkeypatch: pytest.MonkeyPatch):
    source = make_tree("template", {"ok.txt": "fine\n", "secret.txt": "hidden\n"})
    original = Path.read_bytes

    def read_bytes(self: Path) -> bytes:
        if self.name == "secret.txt":
            raise PermissionError(13, "Permission denied")
        return original(self)

    monkeypatch.setattr(Path, "read_bytes", read_bytes)

    with pytest.raises(SourceReadError, match="secret.txt"):
        build_actions(source, plan)


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unavailable")
def test_skipped_and_renamed_entries_are_reported(make_tree, plan: SubstitutionPlan):
    source = make_tree(
        "template",
        {"acme-app.txt": "one\n", "my-cool-app.txt": "two\n", "real/file.txt": "x\n"},
    )
    os.symlink(source / "real", source / "linked", target_is_directory=True)
    warnings: list[str] = []

    build_actions(source, plan, warnings=warnings)

    assert warnings == [
        "linked: directory symlink not followed, its contents are not copied",
        "my-cool-app.txt: name already planned, written as my-cool-app.txt_1",
    ]


@pytest.mark.skipif(not hasattr(os, "mkfifo"), reason="named pipes unavailable")
def test_special_files_are_reported(make_tree, plan: SubstitutionPlan):
    source = make_tree("template", {"docs": None})
    os.mkfifo(source / "docs" / "pipe")
    warnings: list[str] = []

    assert _paths(build_actions(source, plan, warnings=warnings)) == ["docs"]
    assert warnings == ["docs/pipe: not a regular file or directory, skipped"]
