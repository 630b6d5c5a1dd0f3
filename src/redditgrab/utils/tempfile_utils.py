# redditgrab/utils/tempfile_utils.py

import os
from pathlib import Path
from typing import Union

from .log_manager import LogManager

logger = LogManager.setup_main_logger()

PathLike = Union[str, Path]


class TempFileManager:
    @staticmethod
    def cleanup_file(path: PathLike) -> bool:
        """Best-effort unlink of a single file. Returns True when something was removed."""
        try:
            os.remove(path)
            return True
        except FileNotFoundError:
            return False
        except OSError as e:
            logger.debug(f"Could not delete {path}: {e}")
            return False

    @staticmethod
    async def remove_directory(path: PathLike) -> None:
        """
        Recursively delete a directory tree, awaiting every nested level before
        removing the parent. Raises FileNotFoundError if the path is missing;
        any other OSError aborts the walk (earlier deletions stay done).
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Directory not found: {path}")

        with os.scandir(path) as entries:
            children = list(entries)

        for entry in children:
            # never follow symlinked directories out of the tree
            if entry.is_dir(follow_symlinks=False):
                await TempFileManager.remove_directory(entry.path)
            else:
                os.unlink(entry.path)

        os.rmdir(path)
