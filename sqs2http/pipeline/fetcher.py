from anyio.streams.memory import MemoryObjectSendStream

from sqs2http.clients.sqs import SqsClient
from sqs2http.config import Configuration
from sqs2http.datastructures import Message
from sqs2http.exceptions import QueueOperationError
from sqs2http.logger import logger
from sqs2http.pipeline.signals import HaltSignal


class Fetcher:
    """Long-polls the queue and feeds the fetched stream.

    The loop ends on a fatal anomaly or once the halt signal is seen closed
    after a receive call returns. The halt is never checked mid-call, so
    stopping takes at most one long-poll.
    """

    def __init__(self, config: Configuration, client: SqsClient, halt: HaltSignal) -> None:
        self.max_messages = config.fetch_max_messages
        self.wait_secs = config.fetch_wait_secs
        self.visibility_timeout = config.fetch_visibility_timeout_secs
        self.client = client
        self.halt = halt

    async def run(self, fetched: MemoryObjectSendStream[Message]) -> bool:
        """Runs the fetch loop, closing ``fetched`` on the way out.

        Returns:
            False if the loop ended because of a fatal anomaly, True otherwise.
        """
        ok = True
        logger.debug(f"The fetch loop started for {self.client.queue_url}")

        async with fetched:
            while True:
                try:
                    messages = await self.client.receive_messages(
                        self.max_messages,
                        self.wait_secs,
                        self.visibility_timeout,
                    )
                except QueueOperationError as e:
                    if e.anomaly.fatal:
                        logger.critical(
                            "Fatal anomaly while fetching",
                            extra={"anomaly": e.anomaly.value, "detail": e.detail},
                        )
                        ok = False
                        break

                    logger.error(
                        "Anomaly while fetching",
                        extra={"anomaly": e.anomaly.value, "detail": e.detail},
                    )
                else:
                    logger.info(
                        "Fetched messages",
                        extra={
                            "count": len(messages),
                            "wait": self.wait_secs,
                            "ids": [message.id for message in messages],
                        },
                    )
                    for message in messages:
                        await fetched.send(message)

                if self.halt.closed:
                    break

        logger.info("Shutting down fetcher", extra={"ok": ok})
        return ok
