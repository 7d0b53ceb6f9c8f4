"""Root test configuration: content-tree factory and session-level cleanup of runtime artifacts"""

import shutil
from pathlib import Path

import pytest


_PROJECT_ROOT = Path(__file__).parent.parent

_CLEANUP_DIRS = [".generated"]


@pytest.fixture(scope="session", autouse=True)
def cleanup_artifacts():
    """Remove snapshot directories created during the test session."""
    yield
    for name in _CLEANUP_DIRS:
        p = _PROJECT_ROOT / name
        if p.exists():
            shutil.rmtree(p)


@pytest.fixture(name="write_tree")
def write_tree_fixture(tmp_path):
    """Factory writing {rel_path: text | bytes} under a root (default tmp_path/content)."""
    def _write(files: dict, root: Path = None) -> Path:
        root = root or tmp_path / "content"
        root.mkdir(parents=True, exist_ok=True)
        for rel, data in files.items():
            p = root / rel
            p.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(data, bytes):
                p.write_bytes(data)
            else:
                p.write_text(data, encoding="utf-8")
        return root
    return _write
