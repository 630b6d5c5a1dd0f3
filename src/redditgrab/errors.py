# redditgrab/errors.py

from typing import Optional


class GrabError(Exception):
    """Base class for everything that can end a grab run."""


class ThreadFetchError(GrabError):
    """The thread JSON could not be retrieved (transport error or bad status)."""


class MalformedMetadataError(GrabError):
    """The thread JSON did not have the expected listing shape."""


class DownloadError(GrabError):
    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class MergeError(GrabError):
    def __init__(self, message: str, exit_code: Optional[int] = None):
        super().__init__(message)
        self.exit_code = exit_code
