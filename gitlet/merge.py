"""Three-way merge of the current branch with another branch.

Each file named by the merge base, the current head or the other tip is
classified by comparing its blob id in the three commits (an absent file
compares as ``""``):

* head == other, or base == other: keep the current version
* base == head and the other side deleted it: stage the removal
* base == head otherwise: take the other side's version
* anything else: both sides changed it differently, write a conflict

Conflicted files are compared line by line at equal positions, not with
a diff, so an insertion on one side shifts every later line into the
conflict block.
"""
from dataclasses import dataclass, field
from typing import List, Optional

from loguru import logger

from .errors import NoSuchBranch, SelfMerge, UncommittedChanges
from .graph import lowest_common_ancestor

KEEP = "keep"
REMOVE = "remove"
CHECKOUT = "checkout"
CONFLICT = "conflict"

ALREADY_MERGED = "ancestor"
FAST_FORWARD = "fast-forward"
MERGED = "merged"

CONFLICT_START = b"<<<<<<< HEAD\n"
CONFLICT_SEP = b"=======\n"
CONFLICT_END = b">>>>>>>\n"


@dataclass
class MergeResult:
    kind: str
    commit_id: Optional[str] = None
    conflicts: List[str] = field(default_factory=list)

    @property
    def has_conflicts(self):
        return bool(self.conflicts)


def classify(base_id, head_id, other_id):
    if head_id == other_id or base_id == other_id:
        return KEEP
    if base_id == head_id:
        return REMOVE if not other_id else CHECKOUT
    return CONFLICT


def plan(base, head, other):
    """Map every file name that needs work to its action."""
    names = set(base.files) | set(head.files) | set(other.files)
    actions = {}
    for name in sorted(names):
        action = classify(base.blob_id(name), head.blob_id(name), other.blob_id(name))
        if action != KEEP:
            actions[name] = action
    return actions


def _terminated(lines):
    return [line if line.endswith(b"\n") else line + b"\n" for line in lines]


def render_conflict(head_content, other_content):
    ours = (head_content or b"").splitlines(keepends=True)
    theirs = (other_content or b"").splitlines(keepends=True)
    size = max(len(ours), len(theirs))

    def same(i):
        return i < len(ours) and i < len(theirs) and ours[i] == theirs[i]

    out = []
    i = 0
    while i < size:
        if same(i):
            out.append(ours[i])
            i += 1
            continue
        j = i
        while j < size and not same(j):
            j += 1
        out.append(CONFLICT_START)
        out += _terminated(ours[i:j])
        out.append(CONFLICT_SEP)
        out += _terminated(theirs[i:j])
        out.append(CONFLICT_END)
        i = j
    if CONFLICT_START not in out and head_content != other_content:
        # an empty file against a deleted one has no differing line
        out[:0] = [CONFLICT_START, CONFLICT_SEP, CONFLICT_END]
    return b"".join(out)


def _content(store, blob_id):
    blob = store.get_snapshot(blob_id)
    return blob.content if blob is not None else None


def merge(repo, branch_name) -> MergeResult:
    if not repo.stages.read().is_empty():
        raise UncommittedChanges()
    if not repo.refs.exists(branch_name):
        raise NoSuchBranch("A branch with that name does not exist.")
    current = repo.refs.head_branch()
    if branch_name == current:
        raise SelfMerge()

    head = repo.head_commit()
    other = repo.branch_commit(branch_name)
    base_id = lowest_common_ancestor(repo.objects, head.id, other.id)
    logger.debug("merge {} into {}: base {}", branch_name, current, base_id)

    if base_id == other.id:
        return MergeResult(ALREADY_MERGED)
    if base_id == head.id:
        repo.reset_to(other)
        logger.info("fast-forwarded {} to {}", current, other.id)
        return MergeResult(FAST_FORWARD, other.id)

    base = repo.objects.get_commit(base_id)
    actions = plan(base, head, other)
    logger.debug("merge plan: {}", actions)

    stage = repo.stages.read()
    targets = {name: (other.blob_id(name) if action != CONFLICT else "")
               for name, action in actions.items()}
    repo.worktree.check_untracked(head, stage, targets)

    conflicts = []
    for name, action in actions.items():
        if action == REMOVE:
            repo.rm(name)
        elif action == CHECKOUT:
            repo.worktree.checkout_blob(name, other.blob_id(name))
            repo.add(name)
        else:
            merged = render_conflict(_content(repo.objects, head.blob_id(name)),
                                     _content(repo.objects, other.blob_id(name)))
            repo.worktree.write(name, merged)
            repo.add(name)
            conflicts.append(name)

    commit = repo.commit(f"Merged {branch_name} into {current}.",
                         second_parent=other.id, allow_empty=True)
    logger.info("merged {} into {} as {} ({} conflicts)",
                branch_name, current, commit.id, len(conflicts))
    return MergeResult(MERGED, commit.id, conflicts)
