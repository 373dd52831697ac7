import logging
from unittest.mock import MagicMock, patch

import pytest
from botocore.exceptions import NoRegionError
from typer.testing import CliRunner

from sqs2http.__about__ import __version__
from sqs2http.cli.main import app
from sqs2http.cli.utils import LogLevels, get_log_level
from sqs2http.config import Configuration
from sqs2http.exceptions import Sqs2HttpCLIException

runner = CliRunner()

QUEUE_URL = "https://sqs.eu-west-1.amazonaws.com/123456789012/orders"
POST_URL = "https://example.com/hook"


class TestCLI:
    def test_main_no_command(self):
        result = runner.invoke(app)
        assert result.exit_code == 0
        assert "Welcome to the sqs2http CLI!" in result.stdout
        assert "Common Commands:" in result.stdout

    def test_help_command(self):
        result = runner.invoke(app, ["help"])
        assert result.exit_code == 0
        assert "sqs2http" in result.stdout
        assert "run" in result.stdout

    def test_version_option(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert f"Running sqs2http {__version__}" in result.stdout

    @patch("sqs2http.cli.main.setup_logger")
    @patch("sqs2http.cli.main.PipelineRunner")
    def test_run_command(self, mock_runner_class: MagicMock, mock_setup_logger: MagicMock):
        mock_runner_class.return_value.run.return_value = False

        result = runner.invoke(app, ["run", "--queue-url", QUEUE_URL, "--post-url", POST_URL])

        assert result.exit_code == 0
        mock_setup_logger.assert_called_once_with(logging.INFO, False)
        (config,), _ = mock_runner_class.return_value.run.call_args
        assert isinstance(config, Configuration)
        assert config.queue_url == QUEUE_URL
        assert config.post_url == POST_URL
        assert config.region_name == "eu-west-1"
        assert config.fetch_wait_secs == 20

    @patch("sqs2http.cli.main.setup_logger")
    @patch("sqs2http.cli.main.PipelineRunner")
    def test_run_command_with_options(
        self, mock_runner_class: MagicMock, mock_setup_logger: MagicMock
    ):
        mock_runner_class.return_value.run.return_value = False

        result = runner.invoke(
            app,
            [
                "run",
                "--queue-url",
                QUEUE_URL,
                "--post-url",
                POST_URL,
                "--aws-region",
                "us-west-2",
                "--fetch-max-messages",
                "5",
                "--fetch-wait-secs",
                "2",
                "--fetch-visibility-timeout-secs",
                "600",
                "--delete-batch-size",
                "3",
                "--delete-wait-msecs",
                "250",
                "--post-content-type",
                "text/plain",
                "--post-timeout-msecs",
                "5000",
                "--post-max-connections",
                "16",
                "--log-level",
                "DEBUG",
                "--log-serialize",
            ],
        )

        assert result.exit_code == 0
        mock_setup_logger.assert_called_once_with(logging.DEBUG, True)
        (config,), _ = mock_runner_class.return_value.run.call_args
        assert config == Configuration(
            queue_url=QUEUE_URL,
            post_url=POST_URL,
            aws_region="us-west-2",
            fetch_max_messages=5,
            fetch_wait_secs=2,
            fetch_visibility_timeout_secs=600,
            delete_batch_size=3,
            delete_wait_msecs=250,
            post_content_type="text/plain",
            post_timeout_msecs=5000,
            post_max_connections=16,
        )

    @patch("sqs2http.cli.main.setup_logger")
    @patch("sqs2http.cli.main.PipelineRunner")
    def test_run_command_reads_environment(
        self, mock_runner_class: MagicMock, mock_setup_logger: MagicMock
    ):
        mock_runner_class.return_value.run.return_value = False

        result = runner.invoke(
            app,
            ["run"],
            env={
                "SQS2HTTP_QUEUE_URL": QUEUE_URL,
                "SQS2HTTP_POST_URL": POST_URL,
                "SQS2HTTP_DELETE_BATCH_SIZE": "7",
            },
        )

        assert result.exit_code == 0
        (config,), _ = mock_runner_class.return_value.run.call_args
        assert config.delete_batch_size == 7

    @patch("sqs2http.cli.main.setup_logger")
    @patch("sqs2http.cli.main.PipelineRunner")
    def test_run_command_invalid_config(
        self, mock_runner_class: MagicMock, mock_setup_logger: MagicMock
    ):
        result = runner.invoke(
            app,
            [
                "run",
                "--queue-url",
                QUEUE_URL,
                "--post-url",
                "ftp://example.com/hook",
                "--fetch-max-messages",
                "11",
            ],
        )

        assert result.exit_code == 2
        assert "Config is invalid:" in result.stdout
        assert "post_url" in result.stdout
        assert "fetch_max_messages" in result.stdout
        mock_runner_class.assert_not_called()

    @patch("sqs2http.cli.main.setup_logger")
    @patch("sqs2http.pipeline.orchestrator.SqsClient", side_effect=NoRegionError())
    def test_run_command_without_region(
        self, mock_sqs_client_class: MagicMock, mock_setup_logger: MagicMock
    ):
        result = runner.invoke(
            app,
            [
                "run",
                "--queue-url",
                "http://localhost:9324/000000000000/jobs",
                "--post-url",
                POST_URL,
            ],
        )

        assert result.exit_code == 2
        assert "Config is invalid:" in result.stdout
        assert "aws_region" in result.stdout
        mock_sqs_client_class.assert_called_once()

    @patch("sqs2http.cli.main.setup_logger")
    @patch("sqs2http.cli.main.PipelineRunner")
    def test_run_command_fatal_anomaly(
        self, mock_runner_class: MagicMock, mock_setup_logger: MagicMock
    ):
        mock_runner_class.return_value.run.return_value = True

        result = runner.invoke(app, ["run", "--queue-url", QUEUE_URL, "--post-url", POST_URL])

        assert result.exit_code == 1

    def test_run_command_requires_urls(self):
        result = runner.invoke(app, ["run"], env={})
        assert result.exit_code == 2


class TestCLIUtils:
    @pytest.mark.parametrize(
        ["level", "expected"],
        [
            [LogLevels.debug, logging.DEBUG],
            [LogLevels.warn, logging.WARNING],
            ["ERROR", logging.ERROR],
            ["critical", logging.CRITICAL],
            [logging.INFO, logging.INFO],
        ],
    )
    def test_get_log_level(self, level: LogLevels | str | int, expected: int):
        assert get_log_level(level) == expected

    def test_get_log_level_invalid(self):
        with pytest.raises(Sqs2HttpCLIException):
            get_log_level("verbose")
