import json
import os

from loguru import logger

from .config import INDEX_FILE
from .models import Stage


class StageStore:
    """Reads and overwrites the single JSON staging index."""

    def __init__(self, gitlet_dir):
        self.path = os.path.join(gitlet_dir, INDEX_FILE)

    def read(self) -> Stage:
        with open(self.path, 'r') as f:
            return Stage.from_json(json.load(f))

    def write(self, stage: Stage):
        tmp_path = f"{self.path}.tmp"
        with open(tmp_path, 'w') as f:
            json.dump(stage.to_json(), f, indent=2)
        os.replace(tmp_path, self.path)
        logger.debug("index: {} added, {} removed", len(stage.added), len(stage.removed))
