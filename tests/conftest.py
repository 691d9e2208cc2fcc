from __future__ import annotations

import sys
from pathlib import Path
from typing import Callable, Mapping, Union

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

TreeSpec = Mapping[str, Union[str, bytes, None]]


def write_tree(root: Path, files: TreeSpec) -> Path:
    """Create ``files`` below ``root``; ``None`` values create directories."""

    root.mkdir(parents=True, exist_ok=True)
    for relative, content in files.items():
        path = root / relative
        if content is None:
            path.mkdir(parents=True, exist_ok=True)
            continue
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content, encoding="utf-8")
    return root


@pytest.fixture()
def make_tree(tmp_path: Path) -> Callable[[str, TreeSpec], Path]:
    def factory(name: str, files: TreeSpec) -> Path:
        return write_tree(tmp_path / name, files)

    return factory
