"""Remotes: other repositories on the same filesystem.

The registry is a plain text file with one two-line block per remote::

    [remote "origin"]
    path = ../origin/.gitlet

``push`` and ``fetch`` copy raw objects between the two object stores and
then move a single ref. Objects are always copied before the ref moves.
"""
import os
import re

from loguru import logger

from .config import CONFIG_FILE
from .errors import (DivergedHistory, NoSuchRemote, RemoteBranchNotFound,
                     RemoteExists, RemoteNotReachable)
from .graph import bfs, history
from .repository import Repository

_SECTION = re.compile(r'^\[remote "(?P<name>[^"]+)"\]$')


class RemoteRegistry:
    def __init__(self, gitlet_dir):
        self.path = os.path.join(gitlet_dir, CONFIG_FILE)

    def read(self):
        remotes = {}
        try:
            with open(self.path, 'r') as f:
                lines = [line.strip() for line in f if line.strip()]
        except FileNotFoundError:
            return remotes
        name = None
        for line in lines:
            match = _SECTION.match(line)
            if match:
                name = match.group("name")
            elif name is not None and line.startswith("path"):
                remotes[name] = line.split("=", 1)[1].strip()
                name = None
        return remotes

    def write(self, remotes):
        with open(self.path, 'w') as f:
            for name, path in remotes.items():
                f.write(f'[remote "{name}"]\npath = {path}\n')

    def add(self, name, path):
        remotes = self.read()
        if name in remotes:
            raise RemoteExists()
        remotes[name] = path
        self.write(remotes)

    def remove(self, name):
        remotes = self.read()
        if name not in remotes:
            raise NoSuchRemote()
        del remotes[name]
        self.write(remotes)

    def get(self, name):
        remotes = self.read()
        if name not in remotes:
            raise NoSuchRemote()
        return remotes[name]


def add_remote(repo, name, path):
    RemoteRegistry(repo.gitlet_dir).add(name, path)
    logger.info("added remote {} at {}", name, path)


def rm_remote(repo, name):
    RemoteRegistry(repo.gitlet_dir).remove(name)
    logger.info("removed remote {}", name)


def open_remote(repo, name):
    path = RemoteRegistry(repo.gitlet_dir).get(name).replace("/", os.sep)
    if not os.path.isabs(path):
        path = os.path.join(repo.work_tree, path)
    if not os.path.isdir(path):
        raise RemoteNotReachable()
    return Repository.from_gitlet_dir(path)


def copy_objects(source, target, tip_id):
    """Copy every commit reachable from ``tip_id`` and the blobs it names.

    A commit already present in ``target`` has all of its ancestors there
    too, so the walk stops at it.
    """
    copied = 0
    for commit_id in bfs(source.objects, tip_id, stop=target.objects.contains):
        if target.objects.contains(commit_id):
            continue
        commit = source.objects.get_commit(commit_id)
        for blob_id in commit.files.values():
            raw = source.objects.read_raw(blob_id)
            if raw is None:
                raise FileNotFoundError(f"blob {blob_id} is missing from {source.gitlet_dir}")
            copied += target.objects.write_raw(blob_id, raw)
        copied += target.objects.write_raw(commit_id, source.objects.read_raw(commit_id))
    logger.debug("copied {} objects into {}", copied, target.gitlet_dir)
    return copied


def push(repo, remote_name, branch):
    remote = open_remote(repo, remote_name)
    local_tip = repo.head_commit().id
    remote_tip = remote.refs.get(branch)
    if remote_tip is not None and remote_tip not in history(repo.objects, local_tip):
        raise DivergedHistory()
    copy_objects(repo, remote, local_tip)
    remote.refs.set(branch, local_tip)
    logger.info("pushed {} to {}/{}", local_tip, remote_name, branch)


def fetch(repo, remote_name, branch):
    remote = open_remote(repo, remote_name)
    remote_tip = remote.refs.get(branch)
    if remote_tip is None:
        raise RemoteBranchNotFound()
    copy_objects(remote, repo, remote_tip)
    tracking = f"{remote_name}/{branch}"
    repo.refs.set(tracking, remote_tip)
    logger.info("fetched {} as {}", remote_tip, tracking)
    return tracking


def pull(repo, remote_name, branch):
    return repo.merge(fetch(repo, remote_name, branch))
