# redditgrab/models.py
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from .config import RedditVideoConfig


@dataclass
class ThreadMetadata:
    domain: str
    subreddit: str
    title: str
    author: str
    url: str
    video_url: Optional[str] = None

    @property
    def audio_url(self) -> str:
        return f"{self.url.rstrip('/')}/{RedditVideoConfig.AUDIO_SUFFIX}"

    @property
    def is_reddit_video(self) -> bool:
        return self.domain == RedditVideoConfig.VIDEO_DOMAIN

    def summary(self) -> str:
        return (
            "\nGot thread data:\n"
            f"\tSubreddit: r/{self.subreddit}\n"
            f"\tTitle: {self.title}\n"
            f"\tAuthor: {self.author}\n"
            f"\tVideo URL: {self.video_url}\n"
            f"\tAudio URL: {self.audio_url}\n"
        )


@dataclass
class GrabPaths:
    directory: Path
    video: Path
    audio: Path
    output: Path


class RunState(str, Enum):
    FETCHING_METADATA = "fetching_metadata"
    VALIDATING_DOMAIN = "validating_domain"
    PREPARING_DIRECTORY = "preparing_directory"
    DOWNLOADING_VIDEO = "downloading_video"
    DOWNLOADING_AUDIO = "downloading_audio"
    MERGING = "merging"
    DONE = "done"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass
class RunOutcome:
    state: RunState
    exit_code: int
    output_path: Optional[Path] = None
    reason: Optional[str] = None
    metadata: Optional[ThreadMetadata] = None
    had_audio: bool = False

    @property
    def ok(self) -> bool:
        return self.state in (RunState.DONE, RunState.SKIPPED)
