# redditgrab/utils/name_utils.py

from pathlib import Path
from typing import Union

from ..config import RedditVideoConfig
from ..models import GrabPaths


def sanitize_title(title: str) -> str:
    """Strip trailing dots so the title is usable as a folder name on every OS."""
    # Only trailing '.' is handled; separators and reserved characters pass through.
    while title.endswith("."):
        title = title[:-1]
    return title


def build_grab_paths(base_dir: Union[str, Path], subreddit: str, title: str) -> GrabPaths:
    """
    Return the per-thread layout:
      <base>/<subreddit>/<safe_title>/{video.mp4, audio.mp4, <safe_title>.mp4}
    """
    safe_title = sanitize_title(title) or "post"
    directory = (Path(base_dir) / subreddit / safe_title).resolve()
    return GrabPaths(
        directory=directory,
        video=directory / RedditVideoConfig.VIDEO_FILENAME,
        audio=directory / RedditVideoConfig.AUDIO_FILENAME,
        output=directory / f"{safe_title}{RedditVideoConfig.OUTPUT_EXT}",
    )
