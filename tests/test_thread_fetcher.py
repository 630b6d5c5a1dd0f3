import asyncio

import aiohttp
import pytest

from redditgrab.errors import MalformedMetadataError, ThreadFetchError
from redditgrab.thread_fetcher import ThreadFetcher

THREAD_URL = "https://www.reddit.com/r/test/comments/abc123/cool_clip/"
JSON_URL = "https://www.reddit.com/r/test/comments/abc123/cool_clip.json"


def listing(**overrides):
    post = {
        "domain": "v.redd.it",
        "subreddit": "test",
        "title": "Cool Clip.",
        "author": "u1",
        "url": "https://v.redd.it/x",
        "secure_media": {"reddit_video": {"fallback_url": "https://v.redd.it/x/DASH_720.mp4"}},
    }
    post.update(overrides)
    return [{"kind": "Listing", "data": {"children": [{"kind": "t3", "data": post}]}}, {}]


@pytest.mark.parametrize(
    "url,expected",
    [
        (THREAD_URL, JSON_URL),
        (THREAD_URL + "  ", JSON_URL),
        (THREAD_URL.rstrip("/"), JSON_URL),
        (THREAD_URL + "//", JSON_URL),
        (JSON_URL, JSON_URL),
        (THREAD_URL + "?utm_source=share#c", JSON_URL + "?utm_source=share"),
    ],
)
def test_json_url(url, expected):
    assert ThreadFetcher.json_url(url) == expected


def test_parse_listing_extracts_fields():
    meta = ThreadFetcher.parse_listing(listing())
    assert meta.domain == "v.redd.it"
    assert meta.subreddit == "test"
    assert meta.title == "Cool Clip."
    assert meta.author == "u1"
    assert meta.video_url == "https://v.redd.it/x/DASH_720.mp4"
    assert meta.audio_url == "https://v.redd.it/x/DASH_audio.mp4"
    assert meta.is_reddit_video


def test_parse_listing_without_reddit_video():
    meta = ThreadFetcher.parse_listing(listing(domain="i.redd.it", secure_media=None))
    assert meta.video_url is None
    assert not meta.is_reddit_video


@pytest.mark.parametrize(
    "payload",
    [
        {},
        [],
        "nope",
        [{"data": {}}],
        [{"data": {"children": []}}],
        [{"data": {"children": [{"kind": "t3"}]}}],
        [{"data": {"children": [{"data": "text"}]}}],
    ],
)
def test_parse_listing_rejects_bad_shape(payload):
    with pytest.raises(MalformedMetadataError):
        ThreadFetcher.parse_listing(payload)


def test_parse_listing_names_missing_fields():
    payload = listing()
    del payload[0]["data"]["children"][0]["data"]["subreddit"]
    payload[0]["data"]["children"][0]["data"]["author"] = None
    with pytest.raises(MalformedMetadataError, match="subreddit, author"):
        ThreadFetcher.parse_listing(payload)


def test_fetch_uses_json_url(fake_session, response):
    fake_session.routes[JSON_URL] = response(json_data=listing())
    meta = asyncio.run(ThreadFetcher().fetch(THREAD_URL))
    assert fake_session.requested == [JSON_URL]
    assert meta.title == "Cool Clip."


def test_fetch_bad_status(fake_session, response):
    fake_session.routes[JSON_URL] = response(status=429)
    with pytest.raises(ThreadFetchError, match="429"):
        asyncio.run(ThreadFetcher().fetch(THREAD_URL))


def test_fetch_transport_error(fake_session):
    fake_session.routes[JSON_URL] = aiohttp.ClientConnectionError("dns failure")
    with pytest.raises(ThreadFetchError, match="dns failure"):
        asyncio.run(ThreadFetcher().fetch(THREAD_URL))


def test_fetch_non_json_body(fake_session, response):
    fake_session.routes[JSON_URL] = response(json_data=ValueError("Expecting value"))
    with pytest.raises(MalformedMetadataError):
        asyncio.run(ThreadFetcher().fetch(THREAD_URL))
