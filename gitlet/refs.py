import os

from loguru import logger

from .config import HEAD_FILE, HEADS_DIR, REMOTES_DIR


def _read_text(path):
    with open(path, 'r') as f:
        return f.read().strip()


def _write_text(path, text):
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, 'w') as f:
        f.write(text)


class RefStore:
    """Branch pointers plus the HEAD file naming the current branch.

    A name of the form ``remote/branch`` addresses a remote-tracking ref.
    """

    def __init__(self, gitlet_dir):
        self.heads_dir = os.path.join(gitlet_dir, HEADS_DIR)
        self.remotes_dir = os.path.join(gitlet_dir, REMOTES_DIR)
        self.head_path = os.path.join(gitlet_dir, HEAD_FILE)

    def create(self, branch, commit_id):
        os.makedirs(self.heads_dir, exist_ok=True)
        os.makedirs(self.remotes_dir, exist_ok=True)
        self.set(branch, commit_id)
        self.set_head(branch)

    def _path(self, name):
        parts = name.split("/")
        if len(parts) == 1:
            return os.path.join(self.heads_dir, name)
        if len(parts) == 2 and all(parts):
            return os.path.join(self.remotes_dir, parts[0], parts[1])
        raise ValueError(f"invalid branch name {name!r}")

    def exists(self, name):
        try:
            return os.path.isfile(self._path(name))
        except ValueError:
            return False

    def get(self, name):
        if not self.exists(name):
            return None
        return _read_text(self._path(name))

    def set(self, name, commit_id):
        _write_text(self._path(name), commit_id)
        logger.debug("ref {} -> {}", name, commit_id)

    def delete(self, name):
        os.remove(self._path(name))
        logger.debug("deleted ref {}", name)

    def branches(self):
        if not os.path.isdir(self.heads_dir):
            return []
        return sorted(os.listdir(self.heads_dir))

    def head_branch(self):
        return _read_text(self.head_path)

    def set_head(self, name):
        _write_text(self.head_path, name)
        logger.debug("HEAD -> {}", name)

    def head_commit_id(self):
        return self.get(self.head_branch())
