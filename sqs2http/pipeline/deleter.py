import anyio
from anyio.streams.memory import MemoryObjectReceiveStream

from sqs2http.clients.sqs import SqsClient
from sqs2http.config import Configuration
from sqs2http.datastructures import Message
from sqs2http.exceptions import QueueOperationError
from sqs2http.logger import logger


class Deleter:
    """Deletes posted messages from the queue in batches.

    A batch is flushed when it holds ``delete_batch_size`` messages, when
    ``delete_wait_msecs`` have passed since its first message arrived, or when
    the posted stream closes. The deadline is fixed by the first message and
    later arrivals never extend it.
    """

    def __init__(self, config: Configuration, client: SqsClient) -> None:
        self.batch_size = config.delete_batch_size
        self.wait_secs = config.delete_wait_msecs / 1000
        self.client = client

    async def run(self, posted: MemoryObjectReceiveStream[Message]) -> None:
        async with posted:
            while True:
                try:
                    first = await posted.receive()
                except anyio.EndOfStream:
                    break

                batch = await self._accumulate(first, posted)
                await self._delete(batch)

        logger.info("Shutting down deleter")

    async def _accumulate(
        self, first: Message, posted: MemoryObjectReceiveStream[Message]
    ) -> list[Message]:
        batch = [first]
        deadline = anyio.current_time() + self.wait_secs

        while len(batch) < self.batch_size:
            message: Message | None = None
            with anyio.CancelScope(deadline=deadline):
                try:
                    message = await posted.receive()
                except anyio.EndOfStream:
                    pass

            if message is None:
                break

            batch.append(message)

        return batch

    async def _delete(self, batch: list[Message]) -> None:
        ids = [message.id for message in batch]
        logger.info("Deleting messages", extra={"ids": ids})

        try:
            result = await self.client.delete_message_batch(batch)
        except QueueOperationError as e:
            logger.error(
                "Anomaly while deleting",
                extra={"anomaly": e.anomaly.value, "detail": e.detail, "ids": ids},
            )
            return

        if result.ok:
            logger.info("Deleted messages", extra={"deleted": result.successful})
            return

        for failure in result.failed:
            logger.error(
                "Message could not be deleted",
                extra={
                    "message_id": failure.id,
                    "code": failure.code,
                    "reason": failure.message,
                    "sender_fault": failure.sender_fault,
                },
            )

        logger.info(
            "Deleted messages",
            extra={"deleted": result.successful, "failed": len(result.failed)},
        )
