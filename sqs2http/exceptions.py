"""Exceptions raised by sqs2http."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sqs2http.anomalies import Anomaly


class Sqs2HttpException(Exception):
    """Base class for every sqs2http error."""


class InvalidConfigurationError(Sqs2HttpException):
    """The configuration failed validation before the pipeline started."""

    def __init__(self, errors: list[str]) -> None:
        self.errors = errors
        super().__init__("Config is invalid: " + "; ".join(errors))


class QueueOperationError(Sqs2HttpException):
    """A queue call failed. The failure is classified, not subclassed."""

    def __init__(self, operation: str, anomaly: "Anomaly", detail: str) -> None:
        self.operation = operation
        self.anomaly = anomaly
        self.detail = detail
        super().__init__(f"{operation} failed with a {anomaly} anomaly: {detail}")


class Sqs2HttpCLIException(Sqs2HttpException):
    pass
