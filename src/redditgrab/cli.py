import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from .config import OUTPUT_ROOT, ExitCodes, RedditVideoConfig
from .grab_pipeline import VideoGrabPipeline
from .utils.log_manager import LogManager

logger = LogManager.setup_main_logger()


def build_argparser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="reddit-video-grab",
        description="Download a v.redd.it video (with audio) from a Reddit thread",
    )
    p.add_argument("thread_url", help="Reddit thread URL, e.g. https://www.reddit.com/r/sub/comments/abc/title/")
    p.add_argument("--output-dir", "-o", default=str(OUTPUT_ROOT), help="base output directory (default: %(default)s)")
    p.add_argument("--ffmpeg", default=RedditVideoConfig.FFMPEG_BIN, help="ffmpeg binary name or path")
    p.add_argument("--timeout", type=float, default=None, help="total seconds allowed per HTTP request")
    p.add_argument("--merge-timeout", type=float, default=None, help="seconds allowed for ffmpeg")
    p.add_argument("--verbose", "-v", action="store_true", help="debug logging")
    return p


async def main_async(argv: Optional[List[str]] = None) -> int:
    ns = build_argparser().parse_args(argv)

    if ns.verbose:
        LogManager.set_level(logging.DEBUG)

    pipe = VideoGrabPipeline(
        ns.thread_url,
        output_root=ns.output_dir,
        ffmpeg_bin=ns.ffmpeg,
        merge_timeout=ns.merge_timeout,
        http_timeout=ns.timeout,
    )
    try:
        outcome = await pipe.run()
    except Exception as e:
        logger.error(f"An error occurred: {e}", exc_info=True)
        return ExitCodes.UNEXPECTED
    return outcome.exit_code


def main():
    sys.exit(asyncio.run(main_async()))


if __name__ == "__main__":
    main()
