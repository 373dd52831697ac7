from typing import Annotated

import typer

from sqs2http.cli.utils import LogLevels

CLIContext = typer.Context

QUEUE_PANEL = "Queue"
POST_PANEL = "HTTP"
LOG_PANEL = "Logging"

AppVersionOption = Annotated[
    bool,
    typer.Option("--version", "-v", help="Show the version and exit.", is_eager=True),
]

QueueUrlOption = Annotated[
    str,
    typer.Option(
        "--queue-url",
        envvar="SQS2HTTP_QUEUE_URL",
        help="URL of the SQS queue to consume.",
        rich_help_panel=QUEUE_PANEL,
    ),
]
AwsRegionOption = Annotated[
    str | None,
    typer.Option(
        "--aws-region",
        envvar="SQS2HTTP_AWS_REGION",
        help="AWS region of the queue. Inferred from the queue URL when omitted.",
        rich_help_panel=QUEUE_PANEL,
    ),
]
FetchMaxMessagesOption = Annotated[
    int | None,
    typer.Option(
        "--fetch-max-messages",
        envvar="SQS2HTTP_FETCH_MAX_MESSAGES",
        help="Messages per receive call (1-10). [default: 10]",
        rich_help_panel=QUEUE_PANEL,
    ),
]
FetchWaitSecsOption = Annotated[
    int | None,
    typer.Option(
        "--fetch-wait-secs",
        envvar="SQS2HTTP_FETCH_WAIT_SECS",
        help="Long-poll wait per receive call. [default: 20]",
        rich_help_panel=QUEUE_PANEL,
    ),
]
FetchVisibilityTimeoutSecsOption = Annotated[
    int | None,
    typer.Option(
        "--fetch-visibility-timeout-secs",
        envvar="SQS2HTTP_FETCH_VISIBILITY_TIMEOUT_SECS",
        help="Override the queue's visibility timeout (1-43200).",
        rich_help_panel=QUEUE_PANEL,
    ),
]
DeleteBatchSizeOption = Annotated[
    int | None,
    typer.Option(
        "--delete-batch-size",
        envvar="SQS2HTTP_DELETE_BATCH_SIZE",
        help="Messages per delete-batch call (1-10). [default: 10]",
        rich_help_panel=QUEUE_PANEL,
    ),
]
DeleteWaitMsecsOption = Annotated[
    int | None,
    typer.Option(
        "--delete-wait-msecs",
        envvar="SQS2HTTP_DELETE_WAIT_MSECS",
        help="Longest time a delete batch accumulates. [default: 1000]",
        rich_help_panel=QUEUE_PANEL,
    ),
]

PostUrlOption = Annotated[
    str,
    typer.Option(
        "--post-url",
        envvar="SQS2HTTP_POST_URL",
        help="URL every message body is POSTed to.",
        rich_help_panel=POST_PANEL,
    ),
]
PostContentTypeOption = Annotated[
    str | None,
    typer.Option(
        "--post-content-type",
        envvar="SQS2HTTP_POST_CONTENT_TYPE",
        help="Content-Type of the POST requests. [default: application/json]",
        rich_help_panel=POST_PANEL,
    ),
]
PostTimeoutMsecsOption = Annotated[
    int | None,
    typer.Option(
        "--post-timeout-msecs",
        envvar="SQS2HTTP_POST_TIMEOUT_MSECS",
        help="Connect and read timeout of each POST. [default: 180000]",
        rich_help_panel=POST_PANEL,
    ),
]
PostMaxConnectionsOption = Annotated[
    int | None,
    typer.Option(
        "--post-max-connections",
        envvar="SQS2HTTP_POST_MAX_CONNECTIONS",
        help="Concurrent POST requests and pooled connections. [default: 4]",
        rich_help_panel=POST_PANEL,
    ),
]

AppLogLevelOption = Annotated[
    LogLevels,
    typer.Option(
        "--log-level",
        envvar="SQS2HTTP_LOG_LEVEL_NAME",
        case_sensitive=False,
        help="Log level of the application.",
        rich_help_panel=LOG_PANEL,
    ),
]
AppLogSerializeOption = Annotated[
    bool,
    typer.Option(
        "--log-serialize",
        envvar="SQS2HTTP_ENABLE_LOG_SERIALIZE",
        help="Emit logs as JSON lines.",
        rich_help_panel=LOG_PANEL,
    ),
]
