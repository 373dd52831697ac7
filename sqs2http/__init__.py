"""Forward Amazon SQS messages to an HTTP endpoint, deleting only what was delivered."""

from sqs2http.anomalies import Anomaly
from sqs2http.config import Configuration, load_config
from sqs2http.datastructures import Message
from sqs2http.exceptions import InvalidConfigurationError, QueueOperationError, Sqs2HttpException
from sqs2http.pipeline.orchestrator import Pipeline, run
from sqs2http.pipeline.signals import HaltSignal

__all__ = [
    "Anomaly",
    "Configuration",
    "HaltSignal",
    "InvalidConfigurationError",
    "Message",
    "Pipeline",
    "QueueOperationError",
    "Sqs2HttpException",
    "load_config",
    "run",
]
