"""Ancestry queries over the commit DAG.

``lowest_common_ancestor`` returns the first ancestor of ``a`` met while
walking ``b``'s history breadth-first. With at most two parents per commit
and simple fork-shaped histories this is the merge base; on crisscross
merges it is only *a* common ancestor, not necessarily the lowest one.
"""
from collections import deque

from .models import Commit


def _parents(store, commit_id):
    commit = store.get_commit(commit_id)
    if commit is None:
        raise LookupError(f"commit {commit_id} is missing from the object store")
    return commit.parents


def bfs(store, start_id, stop=None):
    """Yield commit ids reachable from ``start_id`` in breadth-first order.

    Commits for which ``stop(commit_id)`` is true are yielded but their
    parents are not followed.
    """
    seen = {start_id}
    queue = deque([start_id])
    while queue:
        commit_id = queue.popleft()
        yield commit_id
        if stop is not None and stop(commit_id):
            continue
        for parent in _parents(store, commit_id):
            if parent not in seen:
                seen.add(parent)
                queue.append(parent)


def history(store, start_id):
    return set(bfs(store, start_id))


def is_ancestor(store, ancestor_id, descendant_id):
    return ancestor_id in history(store, descendant_id)


def lowest_common_ancestor(store, a, b):
    ancestors = history(store, a)
    for commit_id in bfs(store, b):
        if commit_id in ancestors:
            return commit_id
    return Commit.initial().id


def first_parent_history(store, start_id):
    commit_id = start_id
    while commit_id:
        commit = store.get_commit(commit_id)
        if commit is None:
            raise LookupError(f"commit {commit_id} is missing from the object store")
        yield commit
        commit_id = commit.first_parent
