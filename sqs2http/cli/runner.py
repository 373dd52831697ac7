import signal
from types import FrameType

from sqs2http.config import Configuration
from sqs2http.logger import logger
from sqs2http.pipeline.orchestrator import Pipeline
from sqs2http.pipeline.signals import HaltSignal

HALT_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class PipelineRunner:
    """Runs a pipeline in the foreground, halting it on SIGINT or SIGTERM."""

    def run(self, config: Configuration) -> bool:
        """Blocks until the pipeline has drained.

        Returns:
            True if the run ended because of a fatal anomaly.
        """
        pipeline = Pipeline(config)
        self.install_signal_handlers(pipeline.halt)
        _, completion = pipeline.start()

        fatal = completion.result()
        if fatal:
            logger.critical("The fetcher stopped on a fatal anomaly, draining in-flight messages")

        pipeline.join()
        return fatal

    def install_signal_handlers(self, halt: HaltSignal) -> None:
        def handle_signal(signum: int, _: FrameType | None) -> None:
            logger.error(
                "Interrupt received, stopping system.",
                extra={"signal": signal.Signals(signum).name},
            )
            halt.close()

        for signum in HALT_SIGNALS:
            signal.signal(signum, handle_signal)
