import threading

from sqs2http.logger import logger


class HaltSignal:
    """One-shot request to stop fetching.

    Closing is idempotent and safe from any thread, including signal handlers.
    The fetcher only polls it between receive calls.
    """

    def __init__(self) -> None:
        self._event = threading.Event()

    def close(self) -> None:
        if self._event.is_set():
            return

        logger.info("Halt requested, the fetcher will stop after its current receive call")
        self._event.set()

    @property
    def closed(self) -> bool:
        return self._event.is_set()
