# redditgrab/utils/media_utils.py

import asyncio
from pathlib import Path
from typing import List, Optional, Union

import aiohttp

from ..config import RedditVideoConfig
from ..errors import DownloadError, MergeError
from .log_manager import LogManager
from .session import GlobalSession
from .tempfile_utils import TempFileManager

logger = LogManager.setup_main_logger()

PathLike = Union[str, Path]


class MediaDownloader:
    @staticmethod
    async def download_file(
        url: str,
        file_path: PathLike,
        session: Optional[aiohttp.ClientSession] = None,
        chunk_size: int = RedditVideoConfig.DOWNLOAD_CHUNK_SIZE,
    ) -> str:
        """
        Stream `url` into `file_path`. The destination is opened before the request
        is sent; on a non-200 status, a transport error or a write error the partial
        file is removed and DownloadError is raised. Returns the path once the file
        has been closed.
        """
        session = session or await GlobalSession.get()
        file_path = str(file_path)

        try:
            f = open(file_path, "wb")
        except OSError as e:
            raise DownloadError(f"File error: {e}") from e

        try:
            with f:
                async with session.get(url) as resp:
                    if resp.status != 200:
                        raise DownloadError(f"Response status: {resp.status}", status=resp.status)
                    while True:
                        chunk = await resp.content.read(chunk_size)
                        if not chunk:
                            break
                        f.write(chunk)
        except DownloadError:
            TempFileManager.cleanup_file(file_path)
            raise
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            TempFileManager.cleanup_file(file_path)
            raise DownloadError(f"Request error: {str(e) or type(e).__name__}") from e
        except OSError as e:
            TempFileManager.cleanup_file(file_path)
            raise DownloadError(f"File error: {e}") from e

        logger.debug(f"Saved {url} -> {file_path}")
        return file_path


class AVMuxer:
    @staticmethod
    def build_command(
        video_path: PathLike,
        output_path: PathLike,
        audio_path: Optional[PathLike] = None,
        ffmpeg_bin: str = RedditVideoConfig.FFMPEG_BIN,
    ) -> List[str]:
        # inputs first, output last
        command = [ffmpeg_bin, "-y", "-i", str(video_path)]
        if audio_path:
            command += ["-i", str(audio_path)]
        command.append(str(output_path))
        return command

    @staticmethod
    async def mux_av(
        video_path: PathLike,
        output_path: PathLike,
        audio_path: Optional[PathLike] = None,
        ffmpeg_bin: str = RedditVideoConfig.FFMPEG_BIN,
        timeout: Optional[float] = RedditVideoConfig.FFMPEG_TIMEOUT,
    ) -> str:
        """
        Merge video (+ optional audio) into output_path with ffmpeg.
        Without audio ffmpeg just reencodes the video-only input.
        Raises MergeError carrying the exit code on failure.
        """
        command = AVMuxer.build_command(video_path, output_path, audio_path, ffmpeg_bin)
        logger.debug(f"Running: {' '.join(command)}")

        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError as e:
            raise MergeError(f"{ffmpeg_bin} not found on PATH") from e

        try:
            _, stderr = await asyncio.wait_for(process.communicate(), timeout=timeout)
        except asyncio.TimeoutError:
            try:
                process.kill()
            except ProcessLookupError:
                pass  # exited on its own after the deadline
            await process.wait()
            raise MergeError(f"{ffmpeg_bin} timed out after {timeout}s")

        if process.returncode != 0:
            err = (stderr or b"").decode(errors="ignore").strip()
            if err:
                logger.debug("ffmpeg stderr (tail):\n" + "\n".join(err.splitlines()[-10:]))
            raise MergeError(f"Exit code: {process.returncode}", exit_code=process.returncode)

        return str(output_path)
