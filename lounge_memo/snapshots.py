"""
Snapshot Sink

Saves frames at notable moments (race finish, total scores) under a
directory named after the session's creation time.
"""

import logging
from pathlib import Path

import numpy as np
from PIL import Image

from .mogi_result import MogiResult

logger = logging.getLogger(__name__)

SESSION_DIR_FORMAT = "%Y%m%d-%H%M%S"


class SnapshotSink:
    """Writes PNG snapshots to <root>/<session>/<tag>_<race count>.png."""

    def __init__(self, root: Path = Path("results")):
        self.root = Path(root)

    def path_for(self, tag: str, mogi_result: MogiResult) -> Path:
        session = mogi_result.created_at.strftime(SESSION_DIR_FORMAT)
        return self.root / session / f"{tag}_{len(mogi_result.races):02}.png"

    def save(self, frame: np.ndarray, tag: str, mogi_result: MogiResult) -> Path:
        """
        Save an RGB frame.

        Raises:
            OSError: If the directory or the file cannot be written
        """
        path = self.path_for(tag, mogi_result)
        path.parent.mkdir(parents=True, exist_ok=True)
        Image.fromarray(frame).save(path, "PNG")
        logger.info(f"Snapshot saved: {path}")
        return path
