"""Signal the downstream search index to rebuild after a sync."""
import logging
from typing import Optional

import httpx

from .exceptions import IndexSignalError

logger = logging.getLogger(__name__)


class IndexRebuilder:
    """Interface for the external 'rebuild index' operation."""

    def rebuild(self, index_name: str) -> None:
        raise NotImplementedError


class LoggingIndexRebuilder(IndexRebuilder):
    """Records the rebuild request without contacting anything."""

    def rebuild(self, index_name: str) -> None:
        logger.info(f"Index rebuild requested for '{index_name}' (no indexer configured)")


class HttpIndexRebuilder(IndexRebuilder):
    """Asks an indexing server to rebuild an index over HTTP."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 120.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """
        Initialize HTTP index rebuilder.

        Args:
            base_url: Base URL of the indexing server
            timeout: Request timeout in seconds (rebuilds can be slow)
            transport: Optional httpx transport (used by tests)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    def rebuild(self, index_name: str) -> None:
        """
        Request a rebuild of the named index.

        Raises:
            IndexSignalError: If the request fails or is refused
        """
        url = f"{self.base_url}/v1/index/rebuild"

        try:
            with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                response = client.post(url, json={"index": index_name})
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise IndexSignalError(
                f"Index rebuild of '{index_name}' refused: HTTP {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise IndexSignalError(f"Index rebuild of '{index_name}' failed: {e}") from e

        logger.info(f"Index rebuild requested for '{index_name}' at {url}")


def create_index_rebuilder(index_rebuild_url: Optional[str], timeout: float = 120.0) -> IndexRebuilder:
    """Pick the HTTP rebuilder when a URL is configured, else the logging one."""
    if index_rebuild_url:
        return HttpIndexRebuilder(index_rebuild_url, timeout=timeout)
    return LoggingIndexRebuilder()
