import os
from dataclasses import dataclass, field
from typing import List, Tuple

from loguru import logger

from . import merge as merge_engine
from .config import DEFAULT_BRANCH, REPO_DIR, is_ignored, load_ignores
from .errors import (BranchExists, CheckoutCurrentBranch, CommitNotFound,
                     EmptyMessage, FileNotFound, FileNotInCommit, InvalidState,
                     NoSuchBranch, NotInitialized, NothingToCommit,
                     NothingToRemove, RemoveCurrentBranch, RepositoryExists)
from .graph import first_parent_history
from .models import Commit, Stage
from .objects import ObjectStore
from .refs import RefStore
from .stage import StageStore
from .worktree import WorkTree

MODIFIED = "modified"
DELETED = "deleted"


@dataclass
class Status:
    current_branch: str
    branches: List[str] = field(default_factory=list)
    staged: List[str] = field(default_factory=list)
    removed: List[str] = field(default_factory=list)
    modified: List[Tuple[str, str]] = field(default_factory=list)
    untracked: List[str] = field(default_factory=list)


class Repository:
    """Handle on one working tree and its ``.gitlet`` metadata root.

    All state lives on disk; each operation reads what it needs, mutates,
    and writes back. A remote is just another ``Repository``.
    """

    def __init__(self, work_tree):
        self.work_tree = os.path.abspath(work_tree)
        self.gitlet_dir = os.path.join(self.work_tree, REPO_DIR)
        self.objects = ObjectStore(self.gitlet_dir)
        self.stages = StageStore(self.gitlet_dir)
        self.refs = RefStore(self.gitlet_dir)
        self.worktree = WorkTree(self.work_tree, self.objects)

    @classmethod
    def open(cls, work_tree):
        repo = cls(work_tree)
        if not repo.is_initialized():
            raise NotInitialized()
        return repo

    @classmethod
    def from_gitlet_dir(cls, gitlet_dir):
        return cls.open(os.path.dirname(os.path.abspath(gitlet_dir)))

    @classmethod
    def init(cls, work_tree):
        repo = cls(work_tree)
        if os.path.exists(repo.gitlet_dir):
            raise RepositoryExists()
        os.makedirs(repo.gitlet_dir)
        repo.objects.create()
        repo.stages.write(Stage())
        initial = Commit.initial()
        repo.objects.put_commit(initial)
        repo.refs.create(DEFAULT_BRANCH, initial.id)
        logger.info("initialized repository in {}", repo.gitlet_dir)
        return repo

    def is_initialized(self):
        return os.path.isdir(self.gitlet_dir)

    # lookups

    def head_commit(self) -> Commit:
        return self.branch_commit(self.refs.head_branch())

    def branch_commit(self, name) -> Commit:
        commit_id = self.refs.get(name)
        if commit_id is None:
            raise NoSuchBranch()
        commit = self.objects.get_commit(commit_id)
        if commit is None:
            raise LookupError(f"branch {name} points at missing commit {commit_id}")
        return commit

    def get_commit(self, commit_id) -> Commit:
        return self.objects.get_commit(self.objects.resolve_commit(commit_id))

    # staging

    def add(self, file_name):
        blob = self.worktree.blob(file_name)
        if not blob.exists:
            raise FileNotFound()
        head = self.head_commit()
        stage = self.stages.read()
        head_id = head.blob_id(file_name)
        stage_id = stage.added.get(file_name, "")

        if blob.id == head_id:
            if file_name in stage.added or file_name in stage.removed:
                stage.unstage(file_name)
                self.stages.write(stage)
                self.objects.discard_staged(stage_id)
                logger.debug("{} matches HEAD, unstaged", file_name)
        elif blob.id != stage_id:
            self.objects.put_snapshot(blob, staged=True)
            stage.stage_add(file_name, blob.id)
            self.stages.write(stage)
            self.objects.discard_staged(stage_id)
            logger.debug("staged {} as {}", file_name, blob.id)

    def rm(self, file_name):
        head = self.head_commit()
        stage = self.stages.read()
        if file_name in stage.added:
            blob_id = stage.unstage(file_name)
            self.stages.write(stage)
            self.objects.discard_staged(blob_id)
            logger.debug("unstaged {}", file_name)
            return
        if file_name not in head.files:
            raise NothingToRemove()
        stage.stage_remove(file_name)
        self.stages.write(stage)
        if self.worktree.blob(file_name).id == head.files[file_name]:
            self.worktree.delete(file_name)
        logger.debug("staged removal of {}", file_name)

    def commit(self, message, second_parent=None, allow_empty=False) -> Commit:
        if not message or not message.strip():
            raise EmptyMessage()
        stage = self.stages.read()
        if stage.is_empty() and not allow_empty:
            raise NothingToCommit()

        head = self.head_commit()
        files = dict(head.files)
        files.update(stage.added)
        for file_name in stage.removed:
            files.pop(file_name, None)
        parents = [head.id] + ([second_parent] if second_parent else [])
        commit = Commit.create(message, parents, files)

        self.objects.promote(stage.added.values())
        self.objects.put_commit(commit)
        self.refs.set(self.refs.head_branch(), commit.id)
        self.stages.write(Stage())
        self.objects.clear_staging()
        logger.info("committed {} on {}", commit.id, self.refs.head_branch())
        return commit

    # history

    def log(self):
        return first_parent_history(self.objects, self.head_commit().id)

    def global_log(self):
        for commit_id in self.objects.commit_ids():
            yield self.objects.get_commit(commit_id)

    def find(self, message):
        found = [commit.id for commit in self.global_log() if message in commit.message]
        if not found:
            raise CommitNotFound()
        return found

    def status(self) -> Status:
        head = self.head_commit()
        stage = self.stages.read()
        files = set(self.worktree.files())
        ignores = load_ignores(self.work_tree)

        modified = {}
        for name, blob_id in head.files.items():
            if name in stage.added or name in stage.removed:
                continue
            if name not in files:
                modified[name] = DELETED
            elif self.worktree.blob(name).id != blob_id:
                modified[name] = MODIFIED
        for name, blob_id in stage.added.items():
            if name not in files:
                modified[name] = DELETED
            elif self.worktree.blob(name).id != blob_id:
                modified[name] = MODIFIED

        untracked = [
            name for name in sorted(files)
            if name not in stage.added
            and (name not in head.files or name in stage.removed)
            and not is_ignored(name, ignores)
        ]
        return Status(
            current_branch=self.refs.head_branch(),
            branches=self.refs.branches(),
            staged=sorted(stage.added),
            removed=sorted(stage.removed),
            modified=sorted(modified.items()),
            untracked=untracked,
        )

    # branches

    def branch(self, name):
        if "/" in name or not name:
            raise InvalidState(f"Invalid branch name: {name!r}.")
        if self.refs.exists(name):
            raise BranchExists()
        self.refs.set(name, self.head_commit().id)

    def rm_branch(self, name):
        if not self.refs.exists(name):
            raise NoSuchBranch("A branch with that name does not exist.")
        if name == self.refs.head_branch():
            raise RemoveCurrentBranch()
        self.refs.delete(name)

    # working tree

    def reset_to(self, commit: Commit):
        """Make ``commit`` the tip of the current branch and check it out."""
        self._replace_work_tree(commit)
        self.refs.set(self.refs.head_branch(), commit.id)

    def _replace_work_tree(self, target: Commit):
        head = self.head_commit()
        stage = self.stages.read()
        self.worktree.check_untracked(head, stage, target.files)
        self.stages.write(Stage())
        self.objects.clear_staging()
        self.worktree.replace_with(target)

    def checkout_branch(self, name):
        if not self.refs.exists(name):
            raise NoSuchBranch()
        if name == self.refs.head_branch():
            raise CheckoutCurrentBranch()
        self._replace_work_tree(self.branch_commit(name))
        self.refs.set_head(name)
        logger.info("switched to branch {}", name)

    def checkout_file(self, file_name):
        self._checkout_file(self.head_commit(), file_name)

    def checkout_file_from_commit(self, commit_id, file_name):
        self._checkout_file(self.get_commit(commit_id), file_name)

    def _checkout_file(self, commit, file_name):
        if file_name not in commit.files:
            raise FileNotInCommit()
        self.worktree.checkout_blob(file_name, commit.files[file_name])

    def reset(self, commit_id):
        commit = self.get_commit(commit_id)
        self.reset_to(commit)
        logger.info("reset {} to {}", self.refs.head_branch(), commit.id)
        return commit

    def merge(self, branch_name):
        return merge_engine.merge(self, branch_name)
