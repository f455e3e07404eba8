"""
Test Configuration - Shared fixtures for discovery tests.

Uses pytest fixtures to create isolated directory trees.
"""

import shutil
import tempfile
from pathlib import Path
from typing import Generator

import pytest

from docscan.config import DiscoveryConfig, set_config


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    tmp = tempfile.mkdtemp(prefix="docscan_test_")
    # Resolve to handle macOS /var -> /private/var symlink
    resolved = Path(tmp).resolve()
    yield resolved
    shutil.rmtree(str(resolved), ignore_errors=True)


@pytest.fixture
def test_config() -> Generator[DiscoveryConfig, None, None]:
    """Create an isolated test configuration with small queues."""
    config = DiscoveryConfig(
        filter_workers=4,
        candidate_queue_size=8,
        match_queue_size=4,
    )
    set_config(config)
    yield config
    set_config(None)


@pytest.fixture
def scenario_tree(temp_dir: Path) -> Path:
    """root/{a.md, b.txt, .git/c.md, sub/d.md}"""
    (temp_dir / "a.md").write_text("# A")
    (temp_dir / "b.txt").write_text("b")
    (temp_dir / ".git").mkdir()
    (temp_dir / ".git" / "c.md").write_text("# C")
    (temp_dir / "sub").mkdir()
    (temp_dir / "sub" / "d.md").write_text("# D")
    return temp_dir


@pytest.fixture
def sample_tree(temp_dir: Path) -> dict[str, Path]:
    """Create a mixed tree of documents, noise and excluded folders."""
    files = {}

    files["readme"] = temp_dir / "README.md"
    files["readme"].write_text("# Readme")

    files["notes"] = temp_dir / "notes.txt"
    files["notes"].write_text("plain text")

    deep = temp_dir / "docs" / "guide" / "advanced"
    deep.mkdir(parents=True)
    files["deep"] = deep / "tuning.md"
    files["deep"].write_text("# Tuning")

    files["draft"] = temp_dir / "docs" / "draft.md.bak"
    files["draft"].write_text("old")

    # Deeply nested under .git (must be pruned)
    git_sub = temp_dir / ".git" / "sub" / "deeper"
    git_sub.mkdir(parents=True)
    files["git"] = git_sub / "file.md"
    files["git"].write_text("# Not a document")

    modules = temp_dir / "node_modules" / "pkg"
    modules.mkdir(parents=True)
    files["module"] = modules / "README.md"
    files["module"].write_text("# Package readme")

    files["archive"] = temp_dir / "docs" / "bundle.tar.gz"
    files["archive"].write_bytes(b"\x1f\x8b")

    return files
