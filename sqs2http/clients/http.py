from types import TracebackType

import aiohttp

from sqs2http.datastructures import HttpResponse
from sqs2http.logger import logger

# Response bodies are kept only for logging.
MAX_BODY_EXCERPT = 500


class HttpClient:
    """POSTs message bodies to a single URL over a pooled aiohttp session.

    The connector pool is capped at ``max_connections`` so that the number of
    sockets matches the poster's concurrency ceiling.
    """

    def __init__(
        self,
        url: str,
        content_type: str,
        timeout_msecs: int,
        max_connections: int,
    ) -> None:
        self.url = url
        self.content_type = content_type
        self.max_connections = max_connections
        timeout_secs = timeout_msecs / 1000
        self.timeout = aiohttp.ClientTimeout(sock_connect=timeout_secs, sock_read=timeout_secs)
        self._session: aiohttp.ClientSession | None = None

    async def __aenter__(self) -> "HttpClient":
        await self.open()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.close()

    async def open(self) -> None:
        if self._session is not None and not self._session.closed:
            return

        connector = aiohttp.TCPConnector(
            limit=self.max_connections,
            limit_per_host=self.max_connections,
        )
        self._session = aiohttp.ClientSession(
            connector=connector,
            timeout=self.timeout,
        )

    async def close(self) -> None:
        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None

    async def post(self, body: str) -> HttpResponse:
        if self._session is None:
            raise RuntimeError("The HTTP session is not open, use 'async with' or open()")

        logger.debug(f"Posting {len(body)} characters to {self.url}")
        async with self._session.post(
            self.url,
            data=body.encode(),
            headers={"Content-Type": self.content_type},
        ) as response:
            text = await response.text(errors="replace")
            return HttpResponse(
                status=response.status,
                reason=response.reason,
                body=text[:MAX_BODY_EXCERPT],
            )
