import os

from loguru import logger

from .config import REPO_DIR
from .errors import UntrackedObstruction
from .models import Blob


class WorkTree:
    """The flat directory of user files next to the metadata root."""

    def __init__(self, root, store):
        self.root = root
        self.store = store

    def path(self, file_name):
        return os.path.join(self.root, file_name)

    def files(self):
        return sorted(
            name for name in os.listdir(self.root)
            if name != REPO_DIR and os.path.isfile(self.path(name))
        )

    def blob(self, file_name) -> Blob:
        return Blob.from_file(self.root, file_name)

    def write(self, file_name, content):
        with open(self.path(file_name), 'wb') as f:
            f.write(content)

    def delete(self, file_name):
        try:
            os.remove(self.path(file_name))
        except FileNotFoundError:
            pass

    def checkout_blob(self, file_name, blob_id):
        blob = self.store.get_snapshot(blob_id)
        if blob is None or blob.content is None:
            raise FileNotFoundError(f"blob {blob_id} for {file_name} is missing")
        self.write(file_name, blob.content)

    def untracked(self, head, stage):
        return [name for name in self.files()
                if name not in head.files and name not in stage.added]

    def check_untracked(self, head, stage, target_files):
        """Refuse to continue if an untracked file would be overwritten.

        ``target_files`` maps file name to the blob id the operation is
        about to materialise; an untracked file whose current snapshot
        differs from that id blocks the operation.
        """
        blocked = [name for name in self.untracked(head, stage)
                   if name in target_files and self.blob(name).id != target_files[name]]
        if blocked:
            logger.debug("untracked files in the way: {}", blocked)
            raise UntrackedObstruction(blocked)

    def replace_with(self, commit):
        for name in self.files():
            self.delete(name)
        for name, blob_id in sorted(commit.files.items()):
            self.checkout_blob(name, blob_id)
        logger.debug("working tree now matches {}", commit.id)
