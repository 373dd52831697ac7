import rich
import typer

from sqs2http.__about__ import __version__
from sqs2http.cli.options import (
    AppLogLevelOption,
    AppLogSerializeOption,
    AppVersionOption,
    AwsRegionOption,
    CLIContext,
    DeleteBatchSizeOption,
    DeleteWaitMsecsOption,
    FetchMaxMessagesOption,
    FetchVisibilityTimeoutSecsOption,
    FetchWaitSecsOption,
    PostContentTypeOption,
    PostMaxConnectionsOption,
    PostTimeoutMsecsOption,
    PostUrlOption,
    QueueUrlOption,
)
from sqs2http.cli.runner import PipelineRunner
from sqs2http.cli.utils import LogLevels, get_log_level
from sqs2http.config import load_config
from sqs2http.exceptions import InvalidConfigurationError
from sqs2http.logger import setup_logger

app = typer.Typer(
    name="sqs2http",
    help="Forward messages from an SQS queue to an HTTP endpoint.",
    pretty_exceptions_short=True,
    invoke_without_command=True,
    rich_markup_mode="markdown",
)


@app.callback()
def main(
    ctx: CLIContext,
    version: AppVersionOption = False,
) -> None:
    """
    Display helpful tips when the main command is run without any subcommands.
    """
    if version:
        import platform

        typer.echo(
            f"Running sqs2http {__version__} with {platform.python_implementation()} "
            f"{platform.python_version()} on {platform.system()}",
        )
        raise typer.Exit

    if ctx.invoked_subcommand is None:
        rich.print("\n[bold]Welcome to the sqs2http CLI![/bold]")
        rich.print("\n[dim]Forward messages from an SQS queue to an HTTP endpoint.[/dim]")
        rich.print("\n[bold]Usage[/bold]: [cyan]sqs2http [COMMAND] [ARGS]...[/cyan]")
        rich.print("\n[bold]Common Commands:[/bold]")
        rich.print("  [green]run[/green]    Start forwarding messages.")
        rich.print("  [green]help[/green]   Get detailed help for a command.")
        rich.print(
            "\nRun '[cyan]sqs2http --help[/cyan]' for a list of all available commands and options."
        )


@app.command()
def run(
    queue_url: QueueUrlOption,
    post_url: PostUrlOption,
    aws_region: AwsRegionOption = None,
    fetch_max_messages: FetchMaxMessagesOption = None,
    fetch_wait_secs: FetchWaitSecsOption = None,
    fetch_visibility_timeout_secs: FetchVisibilityTimeoutSecsOption = None,
    delete_batch_size: DeleteBatchSizeOption = None,
    delete_wait_msecs: DeleteWaitMsecsOption = None,
    post_content_type: PostContentTypeOption = None,
    post_timeout_msecs: PostTimeoutMsecsOption = None,
    post_max_connections: PostMaxConnectionsOption = None,
    log_level: AppLogLevelOption = LogLevels.info,
    log_serialize: AppLogSerializeOption = False,
) -> None:
    """
    Fetch, post and delete messages until interrupted or a fatal queue error occurs.
    """
    setup_logger(get_log_level(log_level), log_serialize)

    try:
        config = load_config(
            {
                "queue_url": queue_url,
                "post_url": post_url,
                "aws_region": aws_region,
                "fetch_max_messages": fetch_max_messages,
                "fetch_wait_secs": fetch_wait_secs,
                "fetch_visibility_timeout_secs": fetch_visibility_timeout_secs,
                "delete_batch_size": delete_batch_size,
                "delete_wait_msecs": delete_wait_msecs,
                "post_content_type": post_content_type,
                "post_timeout_msecs": post_timeout_msecs,
                "post_max_connections": post_max_connections,
            }
        )
        fatal = PipelineRunner().run(config)
    except InvalidConfigurationError as e:
        rich.print("[bold red]Config is invalid:[/bold red]")
        for error in e.errors:
            rich.print(f"  - {error}")
        raise typer.Exit(code=2) from e

    if fatal:
        raise typer.Exit(code=1)


@app.command(name="help")
def show_help(ctx: typer.Context) -> None:
    """
    Show this message and exit.
    """
    if ctx.parent:
        rich.print(ctx.parent.get_help())


def execute_app() -> None:
    app()


if __name__ == "__main__":
    execute_app()
