"""
Artifact downloader - Streams an export file to disk.

Redirects are followed by hand so that every hop starts from a fresh file:
the partial file is removed before the next location is requested.
"""

import asyncio
import logging
from pathlib import Path
from typing import Optional, Union
from urllib.parse import urljoin

import aiohttp

from ..core.exceptions import DownloadError
from ..models.deck import Artifact

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024


class ArtifactDownloader:
    """Downloads export files, following redirects manually."""

    def __init__(
        self,
        http_session: aiohttp.ClientSession,
        timeout: float = 60.0,
        max_redirects: int = 10,
    ):
        self._http_session = http_session
        self._timeout = timeout
        self._max_redirects = max_redirects

    async def download(self, url: str, dest: Union[str, Path]) -> Artifact:
        """
        Download ``url`` into ``dest``.

        Args:
            url: File URL (pre-signed; no API credentials are sent)
            dest: Destination path; its parent must exist

        Returns:
            The written artifact

        Raises:
            DownloadError: on a non-200 terminal status, a network failure,
                or too many redirects. A partial file may be left behind.
        """
        dest = Path(dest)
        await self._fetch(url, dest, hops=0)

        size = dest.stat().st_size
        if size == 0:
            logger.warning(f"Downloaded file is empty: {dest}")
        return Artifact(path=dest, size_bytes=size, format=dest.suffix.lstrip("."))

    async def _fetch(self, url: str, dest: Path, hops: int) -> None:
        redirect: Optional[str] = None

        # Connect and per-read limits only: a large file may take longer than
        # the timeout in total as long as bytes keep arriving.
        timeout = aiohttp.ClientTimeout(
            total=None,
            sock_connect=self._timeout,
            sock_read=self._timeout,
        )

        try:
            # The file is created before any bytes are read from the network
            with open(dest, "wb") as fh:
                async with self._http_session.get(
                    url,
                    allow_redirects=False,
                    timeout=timeout,
                ) as resp:
                    location = resp.headers.get("Location")
                    if 300 <= resp.status < 400 and location:
                        redirect = urljoin(str(resp.url), location)
                    elif resp.status != 200:
                        raise DownloadError(
                            f"Download failed: HTTP {resp.status}",
                            status=resp.status,
                        )
                    else:
                        async for chunk in resp.content.iter_chunked(CHUNK_SIZE):
                            fh.write(chunk)
        except asyncio.TimeoutError as e:
            raise DownloadError(f"Download timed out: {url}") from e
        except aiohttp.ClientError as e:
            raise DownloadError(f"Download failed: {e}") from e
        except OSError as e:
            raise DownloadError(f"Cannot write {dest}: {e}") from e

        if redirect is None:
            return

        dest.unlink(missing_ok=True)
        if hops >= self._max_redirects:
            raise DownloadError(f"Download failed: more than {self._max_redirects} redirects")

        logger.debug(f"Following redirect to {redirect}")
        await self._fetch(redirect, dest, hops + 1)
