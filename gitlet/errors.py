"""Every failure a gitlet operation can report.

Each exception carries the single line shown to the user. Nothing here is
retried: the CLI prints the message and exits non-zero.
"""


class GitletError(Exception):
    message = "Gitlet operation failed."

    def __init__(self, message=None):
        super().__init__(message or self.message)

    @property
    def text(self):
        return self.args[0]


class NotInitialized(GitletError):
    message = "Not in an initialized Gitlet directory."


# not-found

class NotFound(GitletError):
    pass


class FileNotFound(NotFound):
    message = "File does not exist."


class NoSuchBranch(NotFound):
    message = "No such branch exists."


class NoSuchCommit(NotFound):
    message = "No commit with that id exists."


class FileNotInCommit(NotFound):
    message = "File does not exist in that commit."


class CommitNotFound(NotFound):
    message = "Found no commit with that message."


class NoSuchRemote(NotFound):
    message = "A remote with that name does not exist."


class RemoteNotReachable(NotFound):
    message = "Remote directory not found."


class RemoteBranchNotFound(NotFound):
    message = "That remote does not have that branch."


# already-exists

class AlreadyExists(GitletError):
    pass


class RepositoryExists(AlreadyExists):
    message = "A Gitlet version-control system already exists in the current directory."


class BranchExists(AlreadyExists):
    message = "A branch with that name already exists."


class RemoteExists(AlreadyExists):
    message = "A remote with that name already exists."


# invalid-state

class InvalidState(GitletError):
    pass


class EmptyMessage(InvalidState):
    message = "Please enter a commit message."


class NothingToCommit(InvalidState):
    message = "No changes added to the commit."


class NothingToRemove(InvalidState):
    message = "No reason to remove the file."


class SelfMerge(InvalidState):
    message = "Cannot merge a branch with itself."


class UncommittedChanges(InvalidState):
    message = "You have uncommitted changes."


class CheckoutCurrentBranch(InvalidState):
    message = "No need to checkout the current branch."


class RemoveCurrentBranch(InvalidState):
    message = "Cannot remove the current branch."


class AmbiguousCommitId(InvalidState):
    message = "Commit id prefix matches more than one commit."


class UntrackedObstruction(GitletError):
    message = "There is an untracked file in the way; delete it, or add and commit it first."

    def __init__(self, file_names=(), message=None):
        super().__init__(message)
        self.file_names = sorted(file_names)


class DivergedHistory(GitletError):
    message = "Please pull down remote changes before pushing."
