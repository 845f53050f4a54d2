import os
import fnmatch

REPO_DIR = ".gitlet"
OBJECTS_DIR = "objects"
STAGING_DIR = "staging"
INDEX_FILE = "stage"
REFS_DIR = "refs"
HEADS_DIR = os.path.join(REFS_DIR, "heads")
REMOTES_DIR = os.path.join(REFS_DIR, "remotes")
HEAD_FILE = "HEAD"
CONFIG_FILE = "config"
IGNORE_FILE = ".gitletignore"

DEFAULT_BRANCH = "master"

INITIAL_MESSAGE = "initial commit"
INITIAL_TIMESTAMP = 0

SHORT_ID_LEN = 7

LOG_LEVEL_ENV = "GITLET_LOG_LEVEL"


def load_ignores(work_tree):
    try:
        with open(os.path.join(work_tree, IGNORE_FILE), 'r') as f:
            lines = [line.strip() for line in f]
    except FileNotFoundError:
        return []
    return [line for line in lines if line and not line.startswith('#')]


def is_ignored(name, ignores):
    for pattern in ignores:
        if fnmatch.fnmatch(name, pattern):
            return True
    return False
