import os
import time
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

from .config import INITIAL_MESSAGE, INITIAL_TIMESTAMP
from .hashing import hash_fields


@dataclass(frozen=True)
class Blob:
    """Snapshot of one file's bytes, or a tombstone when the file was absent."""

    file_name: str
    content: Optional[bytes]
    id: str

    @classmethod
    def of(cls, file_name, content):
        if content is None:
            return cls(file_name, None, hash_fields(file_name))
        return cls(file_name, content, hash_fields(file_name, content))

    @classmethod
    def from_file(cls, work_tree, file_name):
        path = os.path.join(work_tree, file_name)
        if not os.path.isfile(path):
            return cls.of(file_name, None)
        with open(path, 'rb') as f:
            return cls.of(file_name, f.read())

    @property
    def exists(self):
        return self.content is not None


def _mapping_field(files):
    return "\n".join(f"{name} {files[name]}" for name in sorted(files))


def commit_id(message, timestamp, parents, files):
    return hash_fields(message, str(timestamp), "\n".join(parents), _mapping_field(files))


@dataclass(frozen=True)
class Commit:
    message: str
    timestamp: int
    parents: Tuple[str, ...]
    files: Mapping[str, str]
    id: str

    @classmethod
    def create(cls, message, parents, files, timestamp=None):
        if timestamp is None:
            timestamp = int(time.time())
        parents = tuple(parents)
        # parent mappings must never be edited through a child
        files = MappingProxyType(dict(files))
        return cls(message, timestamp, parents, files,
                   commit_id(message, timestamp, parents, files))

    @classmethod
    def initial(cls):
        return cls.create(INITIAL_MESSAGE, (), {}, timestamp=INITIAL_TIMESTAMP)

    def compute_id(self):
        return commit_id(self.message, self.timestamp, self.parents, self.files)

    @property
    def first_parent(self):
        return self.parents[0] if self.parents else None

    @property
    def is_merge(self):
        return len(self.parents) > 1

    def blob_id(self, file_name):
        return self.files.get(file_name, "")


@dataclass
class Stage:
    """Pending changes between two commits.

    ``added`` maps file name to the staged blob id; ``removed`` holds file
    names staged for deletion. A name is never in both.
    """

    added: dict = field(default_factory=dict)
    removed: set = field(default_factory=set)

    def stage_add(self, file_name, blob_id):
        self.added[file_name] = blob_id
        self.removed.discard(file_name)

    def stage_remove(self, file_name):
        if file_name in self.added:
            return False
        self.removed.add(file_name)
        return True

    def unstage(self, file_name):
        self.removed.discard(file_name)
        return self.added.pop(file_name, None)

    def is_empty(self):
        return not self.added and not self.removed

    def clear(self):
        self.added.clear()
        self.removed.clear()

    def to_json(self):
        return {"added": dict(sorted(self.added.items())), "removed": sorted(self.removed)}

    @classmethod
    def from_json(cls, data):
        return cls(dict(data.get("added", {})), set(data.get("removed", [])))
