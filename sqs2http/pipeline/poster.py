import aiohttp
import anyio
from anyio.streams.memory import MemoryObjectReceiveStream, MemoryObjectSendStream

from sqs2http.clients.http import HttpClient
from sqs2http.config import Configuration
from sqs2http.datastructures import Message
from sqs2http.logger import logger


class Poster:
    """Forwards fetched messages to the HTTP endpoint.

    At most ``post_max_connections`` requests are in flight. Each request
    holds one semaphore slot which is released exactly once, whatever the
    outcome, and only messages answered with a 200 reach the posted stream.
    """

    def __init__(self, config: Configuration, client: HttpClient) -> None:
        self.max_connections = config.post_max_connections
        self.client = client

    async def run(
        self,
        fetched: MemoryObjectReceiveStream[Message],
        posted: MemoryObjectSendStream[Message],
    ) -> None:
        slots = anyio.Semaphore(self.max_connections)

        async with fetched, posted:
            async with anyio.create_task_group() as tg:
                async for message in fetched:
                    await slots.acquire()
                    tg.start_soon(self._forward, message, posted, slots)

        logger.info("Shutting down poster")

    async def _forward(
        self,
        message: Message,
        posted: MemoryObjectSendStream[Message],
        slots: anyio.Semaphore,
    ) -> None:
        try:
            with logger.contextualize(message_id=message.id):
                if await self._post(message):
                    await posted.send(message)
        finally:
            slots.release()

    async def _post(self, message: Message) -> bool:
        logger.info("Posting message", extra={"url": self.client.url, "size": message.size})
        try:
            response = await self.client.post(message.body)
        except (aiohttp.ClientError, TimeoutError):
            logger.error("Exception while posting", exc_info=True)
            return False
        except Exception:
            # Raised before the request reached the wire, e.g. a malformed URL.
            logger.exception("Exception while initializing post")
            return False

        if response.status != 200:
            logger.error(
                "Post failed",
                extra={
                    "status": response.status,
                    "reason": response.reason,
                    "response_body": response.body,
                },
            )
            return False

        logger.info("Post succeeded")
        return True
