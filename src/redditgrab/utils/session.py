# redditgrab/utils/session.py

from typing import Optional

import aiohttp

from ..config import RedditVideoConfig


class GlobalSession:
    """Lazily created aiohttp session shared by every step of a run."""

    _session: Optional[aiohttp.ClientSession] = None

    @classmethod
    async def get(cls, timeout: Optional[float] = RedditVideoConfig.HTTP_TIMEOUT) -> aiohttp.ClientSession:
        """
        Return the shared session, creating it on first use. `timeout` (total
        seconds per request) only applies when the session is created.
        """
        if cls._session is None or cls._session.closed:
            cls._session = aiohttp.ClientSession(
                headers={"User-Agent": RedditVideoConfig.USER_AGENT},
                timeout=aiohttp.ClientTimeout(total=timeout),
            )
        return cls._session

    @classmethod
    async def close(cls) -> None:
        if cls._session is not None and not cls._session.closed:
            await cls._session.close()
        cls._session = None
