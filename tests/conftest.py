from types import TracebackType
from typing import Any

import anyio
import pytest

from sqs2http.config import Configuration, load_config
from sqs2http.datastructures import DeleteBatchResult, HttpResponse, Message
from sqs2http.pipeline.signals import HaltSignal


def make_message(index: int, body: str | None = None) -> Message:
    return Message(
        id=f"message-{index}",
        body=body if body is not None else f'{{"index": {index}}}',
        receipt_handle=f"receipt-{index}",
        attributes={"ApproximateReceiveCount": "1"},
    )


class FakeSqsClient:
    """Scripted stand-in for SqsClient.

    Each receive call pops the next entry of ``responses``: a list of messages
    is returned, an exception is raised. Once the script runs out the client
    closes ``halt`` (when given) and returns no messages.
    """

    def __init__(self, halt: HaltSignal | None = None) -> None:
        self.queue_url = "https://sqs.us-east-1.amazonaws.com/123456789012/test"
        self.halt = halt
        self.responses: list[list[Message] | Exception] = []
        self.receive_calls: list[dict[str, Any]] = []
        self.delete_calls: list[list[Message]] = []
        self.delete_times: list[float] = []
        self.delete_responses: list[DeleteBatchResult | Exception] = []

    async def receive_messages(
        self, max_messages: int, wait_seconds: int, visibility_timeout: int | None = None
    ) -> list[Message]:
        self.receive_calls.append(
            {
                "max_messages": max_messages,
                "wait_seconds": wait_seconds,
                "visibility_timeout": visibility_timeout,
            }
        )
        await anyio.sleep(0)

        if not self.responses:
            if self.halt is not None:
                self.halt.close()
            await anyio.sleep(0.01)
            return []

        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    async def delete_message_batch(self, messages: list[Message]) -> DeleteBatchResult:
        self.delete_calls.append(list(messages))
        self.delete_times.append(anyio.current_time())
        await anyio.sleep(0)

        if self.delete_responses:
            response = self.delete_responses.pop(0)
            if isinstance(response, Exception):
                raise response
            return response

        return DeleteBatchResult(successful=[message.id for message in messages], failed=[])

    @property
    def deleted_ids(self) -> list[str]:
        return [message.id for batch in self.delete_calls for message in batch]


class FakeHttpClient:
    """Stand-in for HttpClient answering by message body.

    ``outcomes`` maps a body to a status code or to an exception to raise;
    unknown bodies get ``default_status``.
    """

    def __init__(self) -> None:
        self.url = "https://example.com/hook"
        self.outcomes: dict[str, int | Exception] = {}
        self.default_status = 200
        self.delay = 0.0
        self.posted_bodies: list[str] = []
        self.in_flight = 0
        self.max_in_flight = 0
        self.entered = False
        self.exited = False

    async def __aenter__(self) -> "FakeHttpClient":
        self.entered = True
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.exited = True

    async def post(self, body: str) -> HttpResponse:
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await anyio.sleep(self.delay)
            self.posted_bodies.append(body)
            outcome = self.outcomes.get(body, self.default_status)
            if isinstance(outcome, Exception):
                raise outcome
            return HttpResponse(status=outcome, reason=None, body="")
        finally:
            self.in_flight -= 1


@pytest.fixture
def config_values() -> dict[str, Any]:
    return {
        "queue_url": "https://sqs.us-east-1.amazonaws.com/123456789012/test",
        "post_url": "https://example.com/hook",
        "fetch_wait_secs": 0,
        "delete_wait_msecs": 50,
    }


@pytest.fixture
def config(config_values: dict[str, Any]) -> Configuration:
    return load_config(config_values)


@pytest.fixture
def halt() -> HaltSignal:
    return HaltSignal()


@pytest.fixture
def sqs_client(halt: HaltSignal) -> FakeSqsClient:
    return FakeSqsClient(halt)


@pytest.fixture
def http_client() -> FakeHttpClient:
    return FakeHttpClient()
