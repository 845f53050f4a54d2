"""Content-addressed storage for blobs and commits.

Objects are append-only: a write for an id that is already present is a
no-op, and nothing in here edits or deletes a committed object. Blobs
staged by ``add`` live in a side area until the commit that uses them
promotes them into ``objects/``.
"""
import os

from loguru import logger

from .config import OBJECTS_DIR, STAGING_DIR
from .errors import AmbiguousCommitId, NoSuchCommit
from .helpers import (BLOB, COMMIT, dump_blob, dump_commit, encode_object,
                      load_object, object_type, parse_blob, parse_commit)
from .models import Blob, Commit

HEX_DIGITS = "0123456789abcdef"


def _write_file(path, data):
    tmp_path = f"{path}.tmp"
    with open(tmp_path, 'wb') as f:
        f.write(data)
    os.replace(tmp_path, path)


def _read_file(path):
    try:
        with open(path, 'rb') as f:
            return f.read()
    except FileNotFoundError:
        return None


class ObjectStore:
    def __init__(self, gitlet_dir):
        self.objects_dir = os.path.join(gitlet_dir, OBJECTS_DIR)
        self.staging_dir = os.path.join(gitlet_dir, STAGING_DIR)

    def create(self):
        os.makedirs(self.objects_dir, exist_ok=True)
        os.makedirs(self.staging_dir, exist_ok=True)

    def _path(self, obj_id):
        return os.path.join(self.objects_dir, obj_id[:2], obj_id[2:])

    def _staged_path(self, obj_id):
        return os.path.join(self.staging_dir, obj_id)

    # raw access, shared with remote sync

    def contains(self, obj_id):
        return os.path.exists(self._path(obj_id))

    def read_raw(self, obj_id):
        return _read_file(self._path(obj_id))

    def write_raw(self, obj_id, raw):
        path = self._path(obj_id)
        if os.path.exists(path):
            return False
        os.makedirs(os.path.dirname(path), exist_ok=True)
        _write_file(path, raw)
        logger.debug("wrote {} object {}", object_type(raw), obj_id)
        return True

    def iter_ids(self):
        if not os.path.isdir(self.objects_dir):
            return
        for dir_prefix in sorted(os.listdir(self.objects_dir)):
            dir_path = os.path.join(self.objects_dir, dir_prefix)
            if not os.path.isdir(dir_path):
                continue
            for file_name in sorted(os.listdir(dir_path)):
                if file_name.endswith(".tmp"):
                    continue
                yield dir_prefix + file_name

    # snapshots

    def put_snapshot(self, blob: Blob, staged=False):
        raw = encode_object(BLOB, dump_blob(blob))
        if not staged:
            return self.write_raw(blob.id, raw)
        if self.contains(blob.id):
            return False
        _write_file(self._staged_path(blob.id), raw)
        logger.debug("staged blob {} for {}", blob.id, blob.file_name)
        return True

    def get_snapshot(self, blob_id):
        if not blob_id:
            return None
        raw = self.read_raw(blob_id)
        if raw is None:
            raw = _read_file(self._staged_path(blob_id))
        if raw is None:
            return None
        obj_type, body = load_object(raw)
        if obj_type != BLOB:
            return None
        return parse_blob(body)

    def discard_staged(self, blob_id):
        if not blob_id:
            return
        try:
            os.remove(self._staged_path(blob_id))
            logger.debug("dropped staged blob {}", blob_id)
        except FileNotFoundError:
            pass

    def promote(self, blob_ids):
        """Move staged blobs into the permanent store."""
        for blob_id in blob_ids:
            raw = _read_file(self._staged_path(blob_id))
            if raw is None:
                if not self.contains(blob_id):
                    raise FileNotFoundError(f"staged blob {blob_id} is missing")
                continue
            self.write_raw(blob_id, raw)
            self.discard_staged(blob_id)

    def clear_staging(self):
        if not os.path.isdir(self.staging_dir):
            return
        for file_name in os.listdir(self.staging_dir):
            os.remove(os.path.join(self.staging_dir, file_name))

    # commits

    def put_commit(self, commit: Commit):
        return self.write_raw(commit.id, encode_object(COMMIT, dump_commit(commit)))

    def get_commit(self, commit_id):
        if not commit_id:
            return None
        raw = self.read_raw(commit_id)
        if raw is None:
            return None
        obj_type, body = load_object(raw)
        if obj_type != COMMIT:
            return None
        return parse_commit(body)

    def commit_ids(self):
        for obj_id in self.iter_ids():
            raw = self.read_raw(obj_id)
            if raw is not None and object_type(raw) == COMMIT:
                yield obj_id

    def resolve_commit(self, prefix):
        """Expand a full or abbreviated commit id to the stored id."""
        prefix = prefix.strip().lower()
        if not prefix or any(ch not in HEX_DIGITS for ch in prefix):
            raise NoSuchCommit()
        if len(prefix) >= 2:
            dir_path = os.path.join(self.objects_dir, prefix[:2])
            if not os.path.isdir(dir_path):
                raise NoSuchCommit()
            candidates = [prefix[:2] + name for name in os.listdir(dir_path)
                          if name.startswith(prefix[2:]) and not name.endswith(".tmp")]
        else:
            candidates = [obj_id for obj_id in self.iter_ids() if obj_id.startswith(prefix)]
        matches = [obj_id for obj_id in candidates
                   if object_type(self.read_raw(obj_id)) == COMMIT]
        if not matches:
            raise NoSuchCommit()
        if len(matches) > 1:
            raise AmbiguousCommitId()
        return matches[0]
