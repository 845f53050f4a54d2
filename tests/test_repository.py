import os

import pytest

from conftest import commit_file, exists, read, write
from gitlet.errors import (BranchExists, CheckoutCurrentBranch, CommitNotFound,
                           EmptyMessage, FileNotFound, FileNotInCommit,
                           InvalidState, NoSuchBranch, NoSuchCommit,
                           NotInitialized, NothingToCommit, NothingToRemove,
                           RemoveCurrentBranch, RepositoryExists,
                           UntrackedObstruction)
from gitlet.config import load_ignores
from gitlet.hashing import hash_fields
from gitlet.models import Commit
from gitlet.repository import DELETED, MODIFIED, Repository


class TestInit:
    def test_init_creates_root_commit_on_master(self, repo):
        head = repo.head_commit()
        assert head.id == Commit.initial().id
        assert repo.refs.head_branch() == "master"
        assert repo.stages.read().is_empty()

    def test_init_twice_fails(self, repo):
        with pytest.raises(RepositoryExists):
            Repository.init(repo.work_tree)

    def test_open_requires_metadata_root(self, tmp_path):
        with pytest.raises(NotInitialized):
            Repository.open(tmp_path)


class TestAdd:
    def test_missing_file(self, repo):
        with pytest.raises(FileNotFound):
            repo.add("nope.txt")

    def test_add_stages_new_file(self, repo):
        write(repo, "a.txt", "1")
        repo.add("a.txt")
        assert repo.stages.read().added == {"a.txt": hash_fields("a.txt", "1")}

    def test_add_is_idempotent(self, repo):
        write(repo, "a.txt", "1")
        repo.add("a.txt")
        once = repo.stages.read()
        repo.add("a.txt")
        assert repo.stages.read() == once
        assert len(os.listdir(repo.objects.staging_dir)) == 1

    def test_restaging_replaces_stale_snapshot(self, repo):
        write(repo, "a.txt", "1")
        repo.add("a.txt")
        write(repo, "a.txt", "2")
        repo.add("a.txt")
        blob_id = hash_fields("a.txt", "2")
        assert repo.stages.read().added == {"a.txt": blob_id}
        assert os.listdir(repo.objects.staging_dir) == [blob_id]

    def test_reverting_to_head_version_unstages(self, repo):
        commit_file(repo, "a.txt", "1")
        write(repo, "a.txt", "2")
        repo.add("a.txt")
        write(repo, "a.txt", "1")
        repo.add("a.txt")
        assert repo.stages.read().is_empty()
        assert os.listdir(repo.objects.staging_dir) == []

    def test_readding_removed_file_unstages_entirely(self, repo):
        commit_file(repo, "a.txt", "1")
        repo.rm("a.txt")
        assert repo.stages.read().removed == {"a.txt"}
        write(repo, "a.txt", "1")
        repo.add("a.txt")
        assert repo.stages.read().is_empty()


class TestRm:
    def test_untracked_file_has_nothing_to_remove(self, repo):
        write(repo, "loose.txt", "x")
        with pytest.raises(NothingToRemove):
            repo.rm("loose.txt")
        assert exists(repo, "loose.txt")

    def test_staged_only_file_is_unstaged_and_kept(self, repo):
        write(repo, "new.txt", "x")
        repo.add("new.txt")
        repo.rm("new.txt")
        assert repo.stages.read().is_empty()
        assert read(repo, "new.txt") == b"x"

    def test_tracked_unmodified_file_is_deleted(self, repo):
        commit_file(repo, "a.txt", "1")
        repo.rm("a.txt")
        assert repo.stages.read().removed == {"a.txt"}
        assert not exists(repo, "a.txt")

    def test_tracked_modified_file_is_kept(self, repo):
        commit_file(repo, "a.txt", "1")
        write(repo, "a.txt", "local edit")
        repo.rm("a.txt")
        assert repo.stages.read().removed == {"a.txt"}
        assert read(repo, "a.txt") == b"local edit"


class TestCommit:
    def test_scenario_first_commit(self, repo):
        write(repo, "a.txt", "1")
        repo.add("a.txt")
        repo.commit("first")
        history = list(repo.log())
        assert [c.message for c in history] == ["first", "initial commit"]
        assert dict(history[0].files) == {"a.txt": hash_fields("a.txt", "1")}

    def test_empty_message(self, repo):
        write(repo, "a.txt", "1")
        repo.add("a.txt")
        with pytest.raises(EmptyMessage):
            repo.commit("")
        with pytest.raises(EmptyMessage):
            repo.commit("   ")

    def test_nothing_to_commit(self, repo):
        with pytest.raises(NothingToCommit):
            repo.commit("empty")

    def test_commit_applies_additions_and_removals(self, repo):
        commit_file(repo, "a.txt", "1")
        commit_file(repo, "b.txt", "2")
        repo.rm("a.txt")
        write(repo, "c.txt", "3")
        repo.add("c.txt")
        commit = repo.commit("swap")
        assert sorted(commit.files) == ["b.txt", "c.txt"]
        assert repo.stages.read().is_empty()
        assert repo.refs.get("master") == commit.id

    def test_parent_mapping_is_not_mutated(self, repo):
        first = commit_file(repo, "a.txt", "1")
        commit_file(repo, "b.txt", "2")
        assert dict(repo.objects.get_commit(first.id).files) == dict(first.files)

    def test_committed_blobs_are_promoted(self, repo):
        commit = commit_file(repo, "a.txt", "1")
        assert repo.objects.contains(commit.files["a.txt"])
        assert os.listdir(repo.objects.staging_dir) == []

    def test_stored_commit_reproduces_id(self, repo):
        commit = commit_file(repo, "a.txt", "1")
        assert repo.objects.get_commit(commit.id).compute_id() == commit.id


class TestHistory:
    def test_global_log_lists_every_commit(self, repo):
        first = commit_file(repo, "a.txt", "1", "one")
        repo.branch("side")
        repo.checkout_branch("side")
        second = commit_file(repo, "a.txt", "2", "two")
        ids = {c.id for c in repo.global_log()}
        assert ids == {Commit.initial().id, first.id, second.id}

    def test_find_by_substring(self, repo):
        first = commit_file(repo, "a.txt", "1", "fix the parser")
        commit_file(repo, "a.txt", "2", "add docs")
        assert repo.find("parser") == [first.id]

    def test_find_nothing(self, repo):
        with pytest.raises(CommitNotFound):
            repo.find("missing message")


class TestStatus:
    def test_status_sections(self, repo):
        commit_file(repo, "tracked.txt", "1")
        commit_file(repo, "doomed.txt", "1")
        commit_file(repo, "vanished.txt", "1")
        repo.branch("other")

        write(repo, "tracked.txt", "changed")
        repo.rm("doomed.txt")
        os.remove(os.path.join(repo.work_tree, "vanished.txt"))
        write(repo, "staged.txt", "s")
        repo.add("staged.txt")
        write(repo, "staged.txt", "s2")
        write(repo, "loose.txt", "x")
        write(repo, "build.log", "x")
        write(repo, ".gitletignore", "# comment\n*.log\n")

        status = repo.status()
        assert status.current_branch == "master"
        assert status.branches == ["master", "other"]
        assert status.staged == ["staged.txt"]
        assert status.removed == ["doomed.txt"]
        assert status.modified == [
            ("staged.txt", MODIFIED),
            ("tracked.txt", MODIFIED),
            ("vanished.txt", DELETED),
        ]
        assert status.untracked == [".gitletignore", "loose.txt"]


class TestBranches:
    def test_branch_points_at_head(self, repo):
        commit = commit_file(repo, "a.txt", "1")
        repo.branch("feature")
        assert repo.refs.get("feature") == commit.id
        assert repo.refs.head_branch() == "master"

    def test_duplicate_branch(self, repo):
        repo.branch("feature")
        with pytest.raises(BranchExists):
            repo.branch("feature")

    def test_branch_name_with_slash(self, repo):
        with pytest.raises(InvalidState):
            repo.branch("origin/master")

    def test_rm_branch(self, repo):
        repo.branch("feature")
        repo.rm_branch("feature")
        assert not repo.refs.exists("feature")
        with pytest.raises(NoSuchBranch):
            repo.rm_branch("feature")
        with pytest.raises(RemoveCurrentBranch):
            repo.rm_branch("master")


class TestCheckout:
    def test_checkout_branch_round_trip(self, repo):
        commit_file(repo, "a.txt", "1")
        commit_file(repo, "b.txt", "shared")
        repo.branch("feature")
        repo.checkout_branch("feature")
        commit_file(repo, "a.txt", "feature version")
        commit_file(repo, "c.txt", "feature only")

        repo.checkout_branch("master")
        assert read(repo, "a.txt") == b"1"
        assert read(repo, "b.txt") == b"shared"
        assert not exists(repo, "c.txt")

        repo.checkout_branch("feature")
        assert read(repo, "a.txt") == b"feature version"
        assert read(repo, "c.txt") == b"feature only"
        assert repo.refs.head_branch() == "feature"

    def test_checkout_clears_stage(self, repo):
        repo.branch("feature")
        write(repo, "a.txt", "1")
        repo.add("a.txt")
        repo.checkout_branch("feature")
        assert repo.stages.read().is_empty()

    def test_checkout_missing_or_current_branch(self, repo):
        with pytest.raises(NoSuchBranch):
            repo.checkout_branch("ghost")
        with pytest.raises(CheckoutCurrentBranch):
            repo.checkout_branch("master")

    def test_untracked_file_blocks_checkout(self, repo):
        repo.branch("feature")
        repo.checkout_branch("feature")
        commit_file(repo, "b.txt", "feature")
        repo.checkout_branch("master")
        write(repo, "b.txt", "mine")

        with pytest.raises(UntrackedObstruction) as excinfo:
            repo.checkout_branch("feature")
        assert excinfo.value.file_names == ["b.txt"]
        assert read(repo, "b.txt") == b"mine"
        assert repo.refs.head_branch() == "master"

    def test_checkout_file_from_head(self, repo):
        commit_file(repo, "a.txt", "1")
        write(repo, "a.txt", "scratch")
        repo.add("a.txt")
        repo.checkout_file("a.txt")
        assert read(repo, "a.txt") == b"1"
        assert "a.txt" in repo.stages.read().added

    def test_checkout_file_from_abbreviated_commit(self, repo):
        first = commit_file(repo, "a.txt", "1")
        commit_file(repo, "a.txt", "2")
        repo.checkout_file_from_commit(first.id[:8], "a.txt")
        assert read(repo, "a.txt") == b"1"

    def test_checkout_file_errors(self, repo):
        first = commit_file(repo, "a.txt", "1")
        with pytest.raises(FileNotInCommit):
            repo.checkout_file_from_commit(first.id, "b.txt")
        with pytest.raises(FileNotInCommit):
            repo.checkout_file("b.txt")
        with pytest.raises(NoSuchCommit):
            repo.checkout_file_from_commit("zzzzzz", "a.txt")


class TestReset:
    def test_reset_moves_current_branch(self, repo):
        first = commit_file(repo, "a.txt", "1")
        commit_file(repo, "b.txt", "2")
        write(repo, "c.txt", "staged")
        repo.add("c.txt")

        repo.reset(first.id[:6])
        assert repo.refs.get("master") == first.id
        assert repo.refs.head_branch() == "master"
        assert read(repo, "a.txt") == b"1"
        assert not exists(repo, "b.txt")
        assert repo.stages.read().is_empty()

    def test_reset_unknown_commit(self, repo):
        with pytest.raises(NoSuchCommit):
            repo.reset("zzzzzz")

    def test_untracked_file_blocks_reset(self, repo):
        first = commit_file(repo, "a.txt", "1")
        repo.rm("a.txt")
        second = repo.commit("drop a")
        write(repo, "a.txt", "untracked now")
        with pytest.raises(UntrackedObstruction):
            repo.reset(first.id)
        assert repo.refs.get("master") == second.id
        assert read(repo, "a.txt") == b"untracked now"


class TestIgnores:
    def test_comments_and_blank_lines_are_skipped(self, repo):
        write(repo, ".gitletignore", "# build output\n\n  *.log  \n*.tmp\n")
        assert load_ignores(repo.work_tree) == ["*.log", "*.tmp"]

    def test_missing_ignore_file(self, repo):
        assert load_ignores(repo.work_tree) == []
