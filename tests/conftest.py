"""Shared test fixtures for did-i-forget tests."""

import logging
import shutil
import subprocess
from pathlib import Path

import pytest


def pytest_addoption(parser):
    """Add --run-slow option for slow tests."""
    parser.addoption(
        "--run-slow",
        action="store_true",
        default=False,
        help="run slow tests",
    )


def pytest_configure(config):
    """Configure slow marker."""
    config.addinivalue_line("markers", "slow: mark test as slow to run")


def pytest_collection_modifyitems(config, items):
    """Skip slow tests unless --run-slow is given."""
    if config.getoption("--run-slow"):
        return
    skip_slow = pytest.mark.skip(reason="need --run-slow option to run")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)


class GitRepo:
    """Throwaway repository driven through the git binary."""

    def __init__(self, root: Path):
        self.root = root

    def git(self, *args: str) -> str:
        result = subprocess.run(
            ["git", "-C", str(self.root), *args],
            capture_output=True,
            text=True,
            check=True,
        )
        return result.stdout

    def write(self, path: str, content: str) -> None:
        target = self.root / path
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content)

    def commit(self, *paths: str, message: str = "change") -> None:
        """Touch *paths* with fresh content and commit them together."""
        for path in paths:
            target = self.root / path
            previous = target.read_text() if target.exists() else ""
            self.write(path, previous + f"{message}\n")
        self.git("add", "--", *paths)
        self.git("commit", "-q", "-m", message)

    def remove(self, *paths: str, message: str = "remove") -> None:
        self.git("rm", "-q", "--", *paths)
        self.git("commit", "-q", "-m", message)

    def head(self) -> str:
        return self.git("rev-parse", "HEAD").strip()


@pytest.fixture
def git_repo(tmp_path):
    """Empty repository on branch ``main`` with a local identity."""
    if shutil.which("git") is None:
        pytest.skip("git is not installed")

    root = tmp_path / "repo"
    root.mkdir()
    repo = GitRepo(root)
    repo.git("init", "-q")
    repo.git("symbolic-ref", "HEAD", "refs/heads/main")
    repo.git("config", "user.email", "dev@example.com")
    repo.git("config", "user.name", "Dev")
    repo.git("config", "commit.gpgsign", "false")
    return repo


@pytest.fixture
def abc_repo(git_repo):
    """History [{A,B}, {A,B}, {A,C}, {B,C}] on main, A.txt edited locally."""
    git_repo.commit("A.txt", "B.txt", message="one")
    git_repo.commit("A.txt", "B.txt", message="two")
    git_repo.commit("A.txt", "C.txt", message="three")
    git_repo.commit("B.txt", "C.txt", message="four")
    git_repo.write("A.txt", "uncommitted edit\n")
    return git_repo


@pytest.fixture
def package_logger():
    """The did_i_forget logger, with level and file handlers restored afterwards."""
    logger = logging.getLogger("did_i_forget")
    level = logger.level
    yield logger
    for handler in [h for h in logger.handlers if isinstance(h, logging.FileHandler)]:
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(level)
