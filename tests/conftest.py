"""Pytest bootstrap and shared repository fixtures."""

import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent
PROJECT_ROOT_STR = str(PROJECT_ROOT)

if PROJECT_ROOT_STR not in sys.path:
    sys.path.insert(0, PROJECT_ROOT_STR)

from gitlet.repository import Repository  # noqa: E402


def write(repo, name, text):
    (Path(repo.work_tree) / name).write_bytes(text.encode() if isinstance(text, str) else text)


def read(repo, name):
    return (Path(repo.work_tree) / name).read_bytes()


def exists(repo, name):
    return (Path(repo.work_tree) / name).exists()


def commit_file(repo, name, text, message=None):
    write(repo, name, text)
    repo.add(name)
    return repo.commit(message or f"set {name} to {text!r}")


@pytest.fixture
def repo(tmp_path):
    return Repository.init(tmp_path / "work")
