from collections.abc import Sequence
from functools import partial
from typing import Any

import anyio.to_thread
import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from sqs2http.anomalies import classify
from sqs2http.datastructures import DeleteBatchResult, DeleteFailure, Message
from sqs2http.exceptions import QueueOperationError
from sqs2http.logger import logger

# Extra seconds granted to a long-poll response on top of WaitTimeSeconds.
READ_TIMEOUT_MARGIN_SECS = 10
DEFAULT_READ_TIMEOUT_SECS = 60


class SqsClient:
    """Asynchronous facade over a boto3 SQS client bound to one queue.

    boto3 clients are thread-safe, so every call runs in an anyio worker thread
    and a single instance is shared by the fetcher and the deleter.
    """

    def __init__(
        self,
        queue_url: str,
        region_name: str | None = None,
        max_pool_connections: int = 10,
        max_wait_secs: int = 20,
    ) -> None:
        self.queue_url = queue_url
        read_timeout = max(DEFAULT_READ_TIMEOUT_SECS, max_wait_secs + READ_TIMEOUT_MARGIN_SECS)
        self._client = boto3.client(
            "sqs",
            region_name=region_name,
            config=Config(
                max_pool_connections=max_pool_connections,
                read_timeout=read_timeout,
            ),
        )

    async def receive_messages(
        self,
        max_messages: int,
        wait_seconds: int,
        visibility_timeout: int | None = None,
    ) -> list[Message]:
        request: dict[str, Any] = {
            "QueueUrl": self.queue_url,
            "AttributeNames": ["All"],
            "MessageAttributeNames": ["All"],
            "MaxNumberOfMessages": max_messages,
            "WaitTimeSeconds": wait_seconds,
        }
        if visibility_timeout is not None:
            request["VisibilityTimeout"] = visibility_timeout

        response = await self._invoke("ReceiveMessage", self._client.receive_message, request)
        return [Message.from_sqs(entry) for entry in response.get("Messages", [])]

    async def delete_message_batch(self, messages: Sequence[Message]) -> DeleteBatchResult:
        # Entry ids are batch positions: SQS requires them to be distinct, and a
        # redelivered message can share a batch with its earlier copy.
        request = {
            "QueueUrl": self.queue_url,
            "Entries": [
                {"Id": str(index), "ReceiptHandle": message.receipt_handle}
                for index, message in enumerate(messages)
            ],
        }

        response = await self._invoke(
            "DeleteMessageBatch", self._client.delete_message_batch, request
        )
        return DeleteBatchResult(
            successful=[messages[int(entry["Id"])].id for entry in response.get("Successful", [])],
            failed=[
                DeleteFailure(
                    id=messages[int(entry["Id"])].id,
                    code=entry.get("Code", ""),
                    message=entry.get("Message", ""),
                    sender_fault=entry.get("SenderFault", False),
                )
                for entry in response.get("Failed", [])
            ],
        )

    async def _invoke(self, operation: str, call: Any, request: dict[str, Any]) -> dict[str, Any]:
        logger.debug(f"Invoking {operation} on {self.queue_url}")
        try:
            return await anyio.to_thread.run_sync(partial(call, **request))
        except (BotoCoreError, ClientError) as e:
            raise QueueOperationError(operation, classify(e), str(e)) from e
