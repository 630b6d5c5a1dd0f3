# redditgrab/grab_pipeline.py
from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

from .config import OUTPUT_ROOT, ExitCodes, RedditVideoConfig
from .errors import DownloadError, MalformedMetadataError, MergeError, ThreadFetchError
from .models import GrabPaths, RunOutcome, RunState, ThreadMetadata
from .thread_fetcher import ThreadFetcher
from .utils.log_manager import LogManager
from .utils.media_utils import AVMuxer, MediaDownloader
from .utils.name_utils import build_grab_paths
from .utils.session import GlobalSession
from .utils.tempfile_utils import TempFileManager

logger = LogManager.setup_main_logger()


class VideoGrabPipeline:
    """
    Fetch one thread's metadata, download its v.redd.it video (+ audio when
    available) and merge them with ffmpeg into
    <output_root>/<subreddit>/<safe_title>/<safe_title>.mp4.
    """

    def __init__(
        self,
        thread_url: str,
        output_root: Union[str, Path] = OUTPUT_ROOT,
        ffmpeg_bin: str = RedditVideoConfig.FFMPEG_BIN,
        merge_timeout: Optional[float] = RedditVideoConfig.FFMPEG_TIMEOUT,
        http_timeout: Optional[float] = RedditVideoConfig.HTTP_TIMEOUT,
        close_on_exit: bool = True,  # keep False when the caller owns the session
    ):
        self.thread_url = thread_url
        self.output_root = Path(output_root)
        self.ffmpeg_bin = ffmpeg_bin
        self.merge_timeout = merge_timeout
        self.http_timeout = http_timeout
        self.close_on_exit = close_on_exit

        self.state = RunState.FETCHING_METADATA
        self._last_outcome: Optional[RunOutcome] = None

    async def run(self) -> RunOutcome:
        try:
            outcome = await self._run()
        finally:
            if self.close_on_exit:
                await GlobalSession.close()
        self._last_outcome = outcome
        return outcome

    def last_outcome(self) -> Optional[RunOutcome]:
        return self._last_outcome

    async def _run(self) -> RunOutcome:
        # 1) Metadata
        self.state = RunState.FETCHING_METADATA
        try:
            fetcher = ThreadFetcher(await GlobalSession.get(timeout=self.http_timeout))
            meta = await fetcher.fetch(self.thread_url)
        except ThreadFetchError as e:
            logger.error(f"Failed to fetch thread data. {e}")
            return self._fail(ExitCodes.METADATA_FETCH, str(e))
        except MalformedMetadataError as e:
            logger.error(f"Malformed thread data. {e}")
            return self._fail(ExitCodes.MALFORMED_METADATA, str(e))

        # 2) Only v.redd.it threads are handled
        self.state = RunState.VALIDATING_DOMAIN
        if not meta.is_reddit_video:
            logger.info(f"Thread does not contain a {RedditVideoConfig.VIDEO_DOMAIN} video.")
            self.state = RunState.SKIPPED
            return RunOutcome(
                state=RunState.SKIPPED,
                exit_code=ExitCodes.OK,
                reason=f"domain is {meta.domain}",
                metadata=meta,
            )
        if not meta.video_url:
            reason = "thread has no secure_media.reddit_video.fallback_url"
            logger.error(f"Malformed thread data. {reason}")
            return self._fail(ExitCodes.MALFORMED_METADATA, reason, meta)

        logger.info(meta.summary())

        # 3) Output directory
        self.state = RunState.PREPARING_DIRECTORY
        paths = build_grab_paths(self.output_root, meta.subreddit, meta.title)
        try:
            paths.directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error(f"Failed to create directory. {e}")
            logger.info("Exiting...")
            return self._fail(ExitCodes.DIRECTORY, str(e), meta)

        # 4) Video (required)
        self.state = RunState.DOWNLOADING_VIDEO
        logger.info("Downloading video file...")
        try:
            await MediaDownloader.download_file(meta.video_url, paths.video)
            logger.info("Downloaded video.\n")
        except DownloadError as e:
            logger.error(f"Error downloading video. {e}")
            logger.info("Cleaning up and exiting...")
            await self._cleanup(paths)
            return self._fail(ExitCodes.VIDEO_DOWNLOAD, str(e), meta)

        # 5) Audio (optional)
        self.state = RunState.DOWNLOADING_AUDIO
        audio_path: Optional[Path] = paths.audio
        logger.info("Downloading audio file...")
        try:
            await MediaDownloader.download_file(meta.audio_url, paths.audio)
            logger.info("Downloaded audio.\n")
        except DownloadError as e:
            logger.warning(f"Error downloading audio. {e}\n")
            audio_path = None

        # 6) Merge / reencode
        self.state = RunState.MERGING
        if audio_path:
            logger.info("Merging audio and video together...")
        else:
            logger.info("No audio to merge...")
            logger.info("Reencoding video...")

        try:
            await AVMuxer.mux_av(
                paths.video,
                paths.output,
                audio_path=audio_path,
                ffmpeg_bin=self.ffmpeg_bin,
                timeout=self.merge_timeout,
            )
        except MergeError as e:
            logger.error(f"FFMPEG Error! {e}")
            logger.info("Cleaning up and exiting...")
            await self._cleanup(paths)
            return self._fail(ExitCodes.MERGE, str(e), meta)

        self.state = RunState.DONE
        logger.info("Done!")
        logger.info(f"\nOutput file: {paths.output}")
        return RunOutcome(
            state=RunState.DONE,
            exit_code=ExitCodes.OK,
            output_path=paths.output,
            metadata=meta,
            had_audio=audio_path is not None,
        )

    # ---- helpers -------------------------------------------------------------

    def _fail(self, exit_code: int, reason: str, meta: Optional[ThreadMetadata] = None) -> RunOutcome:
        self.state = RunState.FAILED
        return RunOutcome(state=RunState.FAILED, exit_code=exit_code, reason=reason, metadata=meta)

    @staticmethod
    async def _cleanup(paths: GrabPaths) -> None:
        try:
            await TempFileManager.remove_directory(paths.directory)
        except OSError as e:
            logger.warning(f"Could not remove {paths.directory}: {e}")
