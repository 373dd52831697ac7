"""Classification of failed queue operations."""

from enum import StrEnum

from botocore.exceptions import (
    BotoCoreError,
    ClientError,
    ConnectionError,
    HTTPClientError,
    NoCredentialsError,
    NoRegionError,
    ParamValidationError,
    PartialCredentialsError,
)


class Anomaly(StrEnum):
    UNAVAILABLE = "unavailable"
    INTERRUPTED = "interrupted"
    INCORRECT = "incorrect"
    FORBIDDEN = "forbidden"
    UNSUPPORTED = "unsupported"
    NOT_FOUND = "not-found"
    CONFLICT = "conflict"
    FAULT = "fault"
    BUSY = "busy"

    @property
    def fatal(self) -> bool:
        return self in FATAL_ANOMALIES


FATAL_ANOMALIES = frozenset(
    {
        Anomaly.CONFLICT,
        Anomaly.FAULT,
        Anomaly.FORBIDDEN,
        Anomaly.INCORRECT,
        Anomaly.NOT_FOUND,
        Anomaly.UNSUPPORTED,
    }
)

# SQS answers throttling and most client mistakes with a plain 400, so the
# error code is checked before the status.
ERROR_CODE_ANOMALIES: dict[str, Anomaly] = {
    "AccessDenied": Anomaly.FORBIDDEN,
    "AccessDeniedException": Anomaly.FORBIDDEN,
    "AWS.SimpleQueueService.NonExistentQueue": Anomaly.NOT_FOUND,
    "AWS.SimpleQueueService.UnsupportedOperation": Anomaly.UNSUPPORTED,
    "ExpiredToken": Anomaly.FORBIDDEN,
    "ExpiredTokenException": Anomaly.FORBIDDEN,
    "InvalidClientTokenId": Anomaly.FORBIDDEN,
    "KmsThrottled": Anomaly.BUSY,
    "OverLimit": Anomaly.BUSY,
    "QueueDoesNotExist": Anomaly.NOT_FOUND,
    "RequestThrottled": Anomaly.BUSY,
    "ServiceUnavailable": Anomaly.UNAVAILABLE,
    "SignatureDoesNotMatch": Anomaly.FORBIDDEN,
    "Throttling": Anomaly.BUSY,
    "ThrottlingException": Anomaly.BUSY,
    "UnsupportedOperation": Anomaly.UNSUPPORTED,
}

STATUS_ANOMALIES: dict[int, Anomaly] = {
    400: Anomaly.INCORRECT,
    403: Anomaly.FORBIDDEN,
    404: Anomaly.NOT_FOUND,
    405: Anomaly.UNSUPPORTED,
    409: Anomaly.CONFLICT,
    429: Anomaly.BUSY,
    500: Anomaly.FAULT,
    501: Anomaly.UNSUPPORTED,
    502: Anomaly.UNAVAILABLE,
    503: Anomaly.BUSY,
    504: Anomaly.UNAVAILABLE,
}

# Checked in order, so subclasses must come before their bases.
EXCEPTION_ANOMALIES: tuple[tuple[type[BaseException], Anomaly], ...] = (
    (NoCredentialsError, Anomaly.FORBIDDEN),
    (PartialCredentialsError, Anomaly.FORBIDDEN),
    (NoRegionError, Anomaly.INCORRECT),
    (ParamValidationError, Anomaly.INCORRECT),
    (ConnectionError, Anomaly.UNAVAILABLE),
    (HTTPClientError, Anomaly.INTERRUPTED),
    (BotoCoreError, Anomaly.FAULT),
)


def classify_client_error(error: ClientError) -> Anomaly:
    details = error.response.get("Error", {})
    code = details.get("Code", "")
    if code in ERROR_CODE_ANOMALIES:
        return ERROR_CODE_ANOMALIES[code]

    status = error.response.get("ResponseMetadata", {}).get("HTTPStatusCode", 0)
    if status in STATUS_ANOMALIES:
        return STATUS_ANOMALIES[status]

    if 400 <= status < 500:
        return Anomaly.INCORRECT

    return Anomaly.FAULT


def classify(exception: BaseException) -> Anomaly:
    """Maps an exception raised by a queue call to its anomaly category.

    The mapping is total: anything unknown is a fault.
    """
    if isinstance(exception, ClientError):
        return classify_client_error(exception)

    for exception_type, anomaly in EXCEPTION_ANOMALIES:
        if isinstance(exception, exception_type):
            return anomaly

    return Anomaly.FAULT
