from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Message:
    id: str
    body: str
    receipt_handle: str
    attributes: dict[str, str] = field(default_factory=dict)
    message_attributes: dict[str, Any] = field(default_factory=dict)

    @property
    def size(self) -> int:
        return len(self.body.encode())

    @property
    def receive_count(self) -> int:
        return int(self.attributes.get("ApproximateReceiveCount", 0))

    @classmethod
    def from_sqs(cls, entry: dict[str, Any]) -> "Message":
        return cls(
            id=entry["MessageId"],
            body=entry.get("Body", ""),
            receipt_handle=entry["ReceiptHandle"],
            attributes=dict(entry.get("Attributes", {})),
            message_attributes=dict(entry.get("MessageAttributes", {})),
        )


@dataclass(frozen=True)
class DeleteFailure:
    id: str
    code: str
    message: str
    sender_fault: bool


@dataclass(frozen=True)
class DeleteBatchResult:
    successful: list[str]
    failed: list[DeleteFailure]

    @property
    def ok(self) -> bool:
        return not self.failed


@dataclass(frozen=True)
class HttpResponse:
    status: int
    reason: str | None
    body: str
