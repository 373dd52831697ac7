"""Wires the fetch, post and delete stages together."""

from collections.abc import Mapping
from concurrent.futures import Future
from threading import Event, Thread
from typing import Any

import anyio
from anyio.streams.memory import MemoryObjectSendStream
from botocore.exceptions import NoRegionError

from sqs2http.clients.http import HttpClient
from sqs2http.clients.sqs import SqsClient
from sqs2http.config import Configuration, load_config
from sqs2http.datastructures import Message
from sqs2http.exceptions import InvalidConfigurationError, Sqs2HttpException
from sqs2http.logger import logger
from sqs2http.pipeline.deleter import Deleter
from sqs2http.pipeline.fetcher import Fetcher
from sqs2http.pipeline.poster import Poster
from sqs2http.pipeline.signals import HaltSignal

FETCHED_BUFFER_SIZE = 64
POSTED_BUFFER_SIZE = 64


class Pipeline:
    """Runs the fetcher, the poster and the deleter as one unit.

    ``completion`` resolves exactly once, as soon as the fetcher exits, to
    True when the run ended on a fatal queue anomaly. The poster and the
    deleter keep draining after that; ``join()`` waits for them.
    """

    def __init__(
        self,
        config: Configuration | Mapping[str, Any],
        sqs_client: SqsClient | None = None,
        http_client: HttpClient | None = None,
    ) -> None:
        if not isinstance(config, Configuration):
            config = load_config(config)

        self.config = config
        self.halt = HaltSignal()
        self.completion: Future[bool] = Future()

        if sqs_client is None:
            try:
                sqs_client = SqsClient(
                    config.queue_url,
                    region_name=config.region_name,
                    max_wait_secs=config.fetch_wait_secs,
                )
            except NoRegionError as e:
                errors = [
                    "aws_region: not set, and neither the queue URL nor the AWS environment"
                    " names a region"
                ]
                logger.critical("Config is invalid", extra={"errors": errors})
                raise InvalidConfigurationError(errors) from e
        self.sqs_client = sqs_client

        if http_client is None:
            http_client = HttpClient(
                config.post_url,
                content_type=config.post_content_type,
                timeout_msecs=config.post_timeout_msecs,
                max_connections=config.post_max_connections,
            )
        self.http_client = http_client

        self._thread: Thread | None = None
        self._drained = Event()

    async def run(self) -> bool:
        """Runs the pipeline until every stage has drained.

        Returns:
            True if the run ended because of a fatal anomaly.
        """
        fetched_send, fetched_receive = anyio.create_memory_object_stream[Message](
            FETCHED_BUFFER_SIZE
        )
        posted_send, posted_receive = anyio.create_memory_object_stream[Message](
            POSTED_BUFFER_SIZE
        )
        poster = Poster(self.config, self.http_client)
        deleter = Deleter(self.config, self.sqs_client)

        logger.info(
            "Starting...",
            extra={"post_url": self.config.post_url, "queue_url": self.config.queue_url},
        )
        try:
            async with self.http_client:
                async with anyio.create_task_group() as tg:
                    tg.start_soon(self._fetch, fetched_send)
                    tg.start_soon(poster.run, fetched_receive, posted_send)
                    tg.start_soon(deleter.run, posted_receive)
        except BaseException as e:
            if not self.completion.done():
                self.completion.set_exception(e)
            raise
        finally:
            self._drained.set()

        logger.info("The pipeline has drained")
        return self.completion.result()

    async def _fetch(self, fetched: MemoryObjectSendStream[Message]) -> None:
        fetcher = Fetcher(self.config, self.sqs_client, self.halt)
        ok = await fetcher.run(fetched)
        self.completion.set_result(not ok)

    def start(self) -> tuple[HaltSignal, Future[bool]]:
        """Starts the pipeline on its own event loop thread and returns at once."""
        if self._thread is not None:
            raise Sqs2HttpException("The pipeline can only be started once.")

        self._thread = Thread(target=self._run_in_thread, name="sqs2http-pipeline")
        self._thread.start()
        return self.halt, self.completion

    def _run_in_thread(self) -> None:
        try:
            anyio.run(self.run)
        except Exception as e:
            logger.exception("The pipeline stopped unexpectedly")
            if not self.completion.done():
                self.completion.set_exception(e)
        finally:
            self._drained.set()

    def join(self, timeout: float | None = None) -> bool:
        """Waits for every stage to drain. Returns False on timeout."""
        return self._drained.wait(timeout)

    @property
    def drained(self) -> bool:
        return self._drained.is_set()


def run(config: Configuration | Mapping[str, Any]) -> tuple[HaltSignal, Future[bool]]:
    """Validates ``config`` and starts the pipeline in the background.

    Returns:
        The halt signal, to request a graceful stop, and a future that
        resolves to True if the run ended on a fatal queue anomaly.

    Raises:
        InvalidConfigurationError: before anything starts, when ``config`` is
            a mapping that fails validation.
    """
    pipeline = Pipeline(config)
    return pipeline.start()
