# newsletter/telemetry.py
import logging
import logging.handlers
import queue
import sys
import threading
from pathlib import Path
from typing import Optional

from newsletter.config import LogsSettings

DEFAULT_LOG_FILENAME = "newsletter.log"


class LoggingGuard:
    """Process-wide owner of the logging handlers.

    The file handler runs behind a queue so request handling never waits on
    disk I/O. The listener thread lives until ``shutdown`` flushes it.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._listener: Optional[logging.handlers.QueueListener] = None
        self._handlers: list = []
        self.initialized = False

    def setup(self, conf: Optional[LogsSettings] = None) -> None:
        with self._lock:
            if self.initialized:
                return
            conf = conf or LogsSettings()
            formatter = logging.Formatter(conf.format)
            root = logging.getLogger()
            root.setLevel(conf.level.upper())

            stdout_handler = logging.StreamHandler(sys.stdout)
            stdout_handler.setFormatter(formatter)
            self._handlers.append(stdout_handler)

            if conf.path:
                file_handler = logging.handlers.TimedRotatingFileHandler(
                    _log_file(Path(conf.path)), when="midnight", encoding="utf-8"
                )
                file_handler.setFormatter(formatter)
                log_queue: queue.Queue = queue.Queue(-1)
                self._listener = logging.handlers.QueueListener(
                    log_queue, file_handler, respect_handler_level=True
                )
                self._listener.start()
                self._handlers.append(logging.handlers.QueueHandler(log_queue))

            for handler in self._handlers:
                root.addHandler(handler)
            self.initialized = True

    def shutdown(self) -> None:
        with self._lock:
            if not self.initialized:
                return
            root = logging.getLogger()
            for handler in self._handlers:
                root.removeHandler(handler)
            if self._listener is not None:
                # Drains the queue before the worker thread exits
                self._listener.stop()
                for handler in self._listener.handlers:
                    handler.close()
                self._listener = None
            self._handlers = []
            self.initialized = False


def _log_file(path: Path) -> Path:
    # A path without an extension is treated as a directory
    if path.suffix:
        path.parent.mkdir(parents=True, exist_ok=True)
        return path
    path.mkdir(parents=True, exist_ok=True)
    return path / DEFAULT_LOG_FILENAME


logging_guard = LoggingGuard()


def setup_logging(conf: Optional[LogsSettings] = None) -> None:
    logging_guard.setup(conf)


def shutdown_logging() -> None:
    logging_guard.shutdown()
