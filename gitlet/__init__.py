from loguru import logger

from .errors import GitletError
from .repository import Repository

logger.disable("gitlet")

__all__ = ["GitletError", "Repository"]
