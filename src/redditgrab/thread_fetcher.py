# redditgrab/thread_fetcher.py

import asyncio
from typing import Any, Optional
from urllib.parse import urlsplit, urlunsplit

import aiohttp

from .config import RedditVideoConfig
from .errors import MalformedMetadataError, ThreadFetchError
from .models import ThreadMetadata
from .utils.log_manager import LogManager
from .utils.session import GlobalSession

logger = LogManager.setup_main_logger()

REQUIRED_FIELDS = ("domain", "subreddit", "title", "author", "url")


class ThreadFetcher:
    def __init__(self, session: Optional[aiohttp.ClientSession] = None):
        self.session = session

    async def init(self):
        if self.session is None:
            self.session = await GlobalSession.get()

    @staticmethod
    def json_url(thread_url: str) -> str:
        """
        https://www.reddit.com/r/x/comments/abc/title/  ->  .../title.json
        Keeps the query string, drops any fragment.
        """
        parts = urlsplit(thread_url.strip())
        path = parts.path.rstrip("/")
        if not path.endswith(RedditVideoConfig.JSON_SUFFIX):
            path += RedditVideoConfig.JSON_SUFFIX
        return urlunsplit((parts.scheme, parts.netloc, path, parts.query, ""))

    @staticmethod
    def parse_listing(payload: Any) -> ThreadMetadata:
        """Pull the post record out of `[listing, comments]` and validate its fields."""
        if not isinstance(payload, list) or not payload:
            raise MalformedMetadataError("expected a non-empty JSON array at top level")

        node: Any = payload[0]
        for step in ("data", "children", 0, "data"):
            label = f"[0].data.children[0].data (missing {step!r})"
            if isinstance(step, int):
                if not isinstance(node, list) or len(node) <= step:
                    raise MalformedMetadataError(f"no thread record at {label}")
            elif not isinstance(node, dict) or step not in node:
                raise MalformedMetadataError(f"no thread record at {label}")
            node = node[step]

        if not isinstance(node, dict):
            raise MalformedMetadataError("thread record is not an object")

        missing = [k for k in REQUIRED_FIELDS if not isinstance(node.get(k), str)]
        if missing:
            raise MalformedMetadataError(f"thread record missing field(s): {', '.join(missing)}")

        # secure_media is null for anything not hosted on v.redd.it
        secure = node.get("secure_media")
        video = secure.get("reddit_video") if isinstance(secure, dict) else None
        video_url = video.get("fallback_url") if isinstance(video, dict) else None

        return ThreadMetadata(
            domain=node["domain"],
            subreddit=node["subreddit"],
            title=node["title"],
            author=node["author"],
            url=node["url"],
            video_url=video_url if isinstance(video_url, str) else None,
        )

    async def fetch(self, thread_url: str) -> ThreadMetadata:
        if self.session is None:
            await self.init()

        url = self.json_url(thread_url)
        logger.debug(f"Fetching thread JSON: {url}")
        try:
            async with self.session.get(url) as resp:
                if resp.status != 200:
                    raise ThreadFetchError(f"Response status: {resp.status} for {url}")
                try:
                    payload = await resp.json(content_type=None)
                except ValueError as e:
                    raise MalformedMetadataError(f"response is not JSON: {e}") from e
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise ThreadFetchError(f"Request error: {str(e) or type(e).__name__}") from e

        return self.parse_listing(payload)
