"""LinkChecker -- HTTP HEAD probe of backlink URLs

A link is working when the final response (redirects followed) is 2xx.
Everything else, including transport failures, is dead.
"""

import asyncio
import time

import httpx
import structlog
from linkops.core.models import LinkStatus

from .config import LinkCheckConfig
from .exceptions import LinkCheckError, LinkUnreachableError
from .models import LinkCheckResult

log = structlog.get_logger()

# Transport failures that mean "unreachable" rather than a bug
_CONNECTION_ERROR_TYPES = (
    ConnectionError,
    OSError,
    TimeoutError,
    httpx.TransportError,
    httpx.InvalidURL,
    httpx.UnsupportedProtocol,
)


class LinkChecker:
    """Probe URLs with HEAD requests through one shared httpx.AsyncClient"""

    def __init__(
        self,
        config: LinkCheckConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Args:
            config: probe configuration, defaults to LinkCheckConfig()
            transport: optional httpx transport (tests pass httpx.MockTransport)
        """
        self._config = config or LinkCheckConfig()
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            transport=self._transport,
            timeout=self._config.timeout_s,
            follow_redirects=True,
            headers={"User-Agent": self._config.user_agent},
        )

    async def _probe(self, client: httpx.AsyncClient, url: str) -> httpx.Response:
        try:
            return await client.head(url)
        except _CONNECTION_ERROR_TYPES as e:
            raise LinkUnreachableError(url, e) from e

    async def _check_with(self, client: httpx.AsyncClient, url: str) -> LinkCheckResult:
        start_time = time.monotonic()
        try:
            response = await self._probe(client, url)
        except LinkCheckError as e:
            duration_ms = int((time.monotonic() - start_time) * 1000)
            log.info("link_check_unreachable", url=url, error=str(e))
            return LinkCheckResult(
                url=url,
                status=LinkStatus.DEAD,
                duration_ms=duration_ms,
                error=str(e),
            )

        duration_ms = int((time.monotonic() - start_time) * 1000)
        status = LinkStatus.WORKING if response.is_success else LinkStatus.DEAD
        log.debug(
            "link_check_completed",
            url=url,
            status_code=response.status_code,
            status=status.value,
            duration_ms=duration_ms,
        )
        return LinkCheckResult(
            url=url,
            status=status,
            status_code=response.status_code,
            duration_ms=duration_ms,
        )

    async def check(self, url: str) -> LinkCheckResult:
        """Probe a single URL"""
        async with self._client() as client:
            return await self._check_with(client, url)

    async def check_many(self, urls: list[str]) -> list[LinkCheckResult]:
        """Probe URLs concurrently, bounded by max_concurrency

        Returns:
            One result per input URL, in input order
        """
        if not urls:
            return []

        semaphore = asyncio.Semaphore(self._config.max_concurrency)

        async with self._client() as client:

            async def _bounded(url: str) -> LinkCheckResult:
                async with semaphore:
                    return await self._check_with(client, url)

            results = await asyncio.gather(*(_bounded(url) for url in urls))

        dead = sum(1 for r in results if not r.is_working)
        log.info("link_check_batch_completed", total=len(results), dead=dead)
        return list(results)
