"""Release staged archive directories and uploaded files."""

from __future__ import annotations

import logging
import shutil
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path

log = logging.getLogger(__name__)


def remove_path(path: Path) -> None:
    """Remove a file or directory tree, logging instead of raising on failure."""

    try:
        if path.is_dir() and not path.is_symlink():
            shutil.rmtree(path)
        else:
            path.unlink()
    except OSError:
        log.exception(
            "Error while trying to remove %s. You might want to remove it yourself.",
            path,
        )
