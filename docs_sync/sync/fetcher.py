"""Archive download over HTTPS."""
import logging
import ssl
from pathlib import Path
from typing import Optional
import httpx

from ..config import DocsSyncConfig
from ..exceptions import DownloadError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024


def create_tls_context() -> ssl.SSLContext:
    """SSL context that refuses anything older than TLS 1.2."""
    context = ssl.create_default_context()
    context.minimum_version = ssl.TLSVersion.TLSv1_2
    return context


class ArchiveFetcher:
    """Downloads a remote archive to a local path."""

    def __init__(
        self,
        config: Optional[DocsSyncConfig] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """
        Initialize archive fetcher.

        Args:
            config: Sync configuration
            transport: Optional httpx transport (tests inject a MockTransport)
        """
        self.config = config or DocsSyncConfig()
        self._transport = transport
        self._client: Optional[httpx.Client] = None

    def __enter__(self):
        """Context manager entry."""
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()

    def connect(self):
        """Initialize HTTP client."""
        if self._client is None:
            self._client = httpx.Client(
                timeout=self.config.request_timeout,
                follow_redirects=True,
                verify=create_tls_context(),
                transport=self._transport,
                headers={
                    "User-Agent": self.config.user_agent,
                    "Accept": "application/zip,application/octet-stream,*/*",
                }
            )

    def close(self):
        """Close HTTP client."""
        if self._client:
            self._client.close()
            self._client = None

    def fetch(self, url: str, destination: Path) -> Path:
        """
        Download an archive, replacing any file already at the destination.

        Args:
            url: Archive URL
            destination: Local file path to write

        Returns:
            The destination path

        Raises:
            DownloadError: On transport/HTTP failure, timeout or unwritable destination
        """
        if self._client is None:
            self.connect()

        destination = Path(destination)

        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            if destination.exists():
                destination.unlink()
        except OSError as e:
            raise DownloadError(f"Cannot prepare {destination}: {e}") from e

        logger.info(f"Downloading {url} to {destination}")

        try:
            with self._client.stream("GET", url) as response:
                response.raise_for_status()

                size = 0
                with open(destination, "wb") as f:
                    for chunk in response.iter_bytes(CHUNK_SIZE):
                        f.write(chunk)
                        size += len(chunk)

        except httpx.HTTPStatusError as e:
            self._discard(destination)
            raise DownloadError(
                f"HTTP {e.response.status_code} downloading {url}"
            ) from e
        except httpx.HTTPError as e:
            self._discard(destination)
            raise DownloadError(f"Error downloading {url}: {e}") from e
        except OSError as e:
            self._discard(destination)
            raise DownloadError(f"Cannot write {destination}: {e}") from e

        logger.debug(f"Downloaded {size} bytes from {url}")
        return destination

    def _discard(self, path: Path) -> None:
        """Remove a partially written download."""
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning(f"Could not remove partial download {path}: {e}")
