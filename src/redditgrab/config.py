# redditgrab/config.py

import os
from pathlib import Path

OUTPUT_ROOT = Path(os.getenv("RVG_OUTPUT_ROOT", "").strip() or "output")


class RedditVideoConfig:
    VIDEO_DOMAIN = "v.redd.it"
    JSON_SUFFIX = ".json"
    AUDIO_SUFFIX = "DASH_audio.mp4"

    VIDEO_FILENAME = "video.mp4"
    AUDIO_FILENAME = "audio.mp4"
    OUTPUT_EXT = ".mp4"

    FFMPEG_BIN = "ffmpeg"
    FFMPEG_TIMEOUT = None  # seconds; None waits forever

    HTTP_TIMEOUT = None    # total seconds per request; None disables the deadline
    DOWNLOAD_CHUNK_SIZE = 1024 * 1024

    USER_AGENT = "python:reddit-video-grab:0.1 (single thread video grabber)"


class ExitCodes:
    OK = 0
    UNEXPECTED = 1
    METADATA_FETCH = 2
    MALFORMED_METADATA = 3
    DIRECTORY = 4
    VIDEO_DOWNLOAD = 5
    MERGE = 6
