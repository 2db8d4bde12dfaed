"""Watch loop supervisor: lifecycle, shutdown triggers and draining."""

import logging
import queue
import threading
import time
from typing import Callable, List, Optional

from .config import ExportWatchConfig
from .exceptions import SupervisorAlreadyRunningError
from .fs_watcher import DirectoryWatcher
from .models import SupervisorState, WatchedEvent
from .processor import ChangeProcessor

logger = logging.getLogger(__name__)

_STOP = object()


class WatchSupervisor:
    """
    Main orchestrator for watching the editor's export directory.

    Runs through STARTING -> WATCHING -> DRAINING -> STOPPED. The observer
    thread only queues events; a single consumer thread hands them to the
    change processor one at a time, so a slow conversion never stops new
    events from being accepted.

    Shutdown is cooperative. It is triggered by stop(), by the cancel key
    callback or by the supervised editor process exiting, and waits for the
    event in flight (and any already queued) to finish.
    """

    def __init__(
        self,
        config: ExportWatchConfig,
        processor: Optional[ChangeProcessor] = None,
        supervised_process=None,
        cancel_requested: Optional[Callable[[], bool]] = None,
        on_watching: Optional[Callable[[], None]] = None,
        watcher: Optional[DirectoryWatcher] = None,
    ):
        """
        Initialize the supervisor.

        Args:
            config: Export watcher configuration
            processor: Change processor (built from config by default)
            supervised_process: Editor process handle with a poll() method
            cancel_requested: Returns True when the operator asked to quit
            on_watching: Called once when the WATCHING state is entered
            watcher: Directory watcher (a watchdog based one by default)
        """
        self.config = config
        self.processor = processor or ChangeProcessor(config)
        self.supervised_process = supervised_process
        self.cancel_requested = cancel_requested
        self.on_watching = on_watching
        self._watcher = watcher or DirectoryWatcher(self.submit, recursive=config.recursive)

        self._state = SupervisorState.STOPPED
        self._running = False
        self._stop_event = threading.Event()
        self._queue: "queue.Queue" = queue.Queue()
        self._pending = 0
        self._lock = threading.Lock()
        self._threads: List[threading.Thread] = []

    @property
    def state(self) -> SupervisorState:
        return self._state

    @property
    def is_running(self) -> bool:
        """Check if the supervisor is running."""
        return self._running

    @property
    def is_idle(self) -> bool:
        """True when no event is queued or being handled."""
        with self._lock:
            pending = self._pending
        return pending == 0 and not self.processor.is_busy

    def submit(self, event: WatchedEvent) -> None:
        """
        Queue a raw event for processing.

        Args:
            event: The raw event from the file system watcher
        """
        with self._lock:
            self._pending += 1
        self._queue.put(event)

    def stop(self) -> None:
        """Request a graceful shutdown. Safe to call from any thread."""
        self._stop_event.set()

    def run(self) -> None:
        """
        Run the watch loop (blocking) until a shutdown trigger fires.

        Raises:
            SupervisorAlreadyRunningError: If already running
        """
        with self._lock:
            if self._running:
                raise SupervisorAlreadyRunningError("Supervisor is already running")
            self._running = True

        self._set_state(SupervisorState.STARTING)
        try:
            if self._wait_for_directory():
                self._watch()
        except KeyboardInterrupt:
            logger.info("Interrupted by user")
        except OSError as e:
            logger.error(f"Failed to watch {self.config.watch_directory}: {e}", exc_info=True)
        finally:
            self._shutdown()

    def _set_state(self, state: SupervisorState) -> None:
        logger.debug(f"Supervisor state: {self._state.value} -> {state.value}")
        self._state = state

    def _wait_for_directory(self) -> bool:
        """Wait until the editor creates the watch directory."""
        watch_directory = self.config.watch_directory
        interval = self.config.directory_poll_ms / 1000.0
        announced = False

        while not watch_directory.is_dir():
            if not announced:
                logger.info(f"Waiting for {watch_directory} to be created...")
                announced = True
            if self._shutdown_requested():
                return False
            self._stop_event.wait(timeout=interval)

        return True

    def _watch(self) -> None:
        consumer = threading.Thread(target=self._consumer_loop, name="ChangeConsumer")
        consumer.daemon = True
        consumer.start()
        self._threads.append(consumer)

        self._watcher.start(self.config.watch_directory)
        self._set_state(SupervisorState.WATCHING)
        logger.info(f"Watching {self.config.watch_directory}")

        if self.on_watching:
            self.on_watching()

        interval = self.config.shutdown_poll_ms / 1000.0
        while not self._shutdown_requested():
            self._stop_event.wait(timeout=interval)

    def _shutdown_requested(self) -> bool:
        """Check all shutdown triggers, latching the first one that fires."""
        if self._stop_event.is_set():
            return True

        if self.cancel_requested is not None and self.cancel_requested():
            logger.info("Cancel key pressed")
            self._stop_event.set()
            return True

        if self.supervised_process is not None and self.supervised_process.poll() is not None:
            logger.info("Editor process has exited")
            self._stop_event.set()
            return True

        return False

    def _shutdown(self) -> None:
        """Stop watching, drain in-flight work and stop the consumer."""
        logger.info("Shutting down.")
        self._set_state(SupervisorState.DRAINING)
        self._stop_event.set()
        self._watcher.stop()

        if not self._drain():
            logger.warning("Drain timed out with work still in flight")

        self._queue.put(_STOP)
        for thread in self._threads:
            if thread.is_alive():
                thread.join(timeout=2.0)
        self._threads.clear()

        with self._lock:
            self._running = False
        self._set_state(SupervisorState.STOPPED)
        logger.info(f"Stopped: {self.processor.stats.to_dict()}")

    def _drain(self) -> bool:
        """
        Wait until no event is queued or being handled.

        Returns:
            True once idle, False if the drain timeout elapsed first
        """
        interval = self.config.drain_poll_ms / 1000.0
        timeout_ms = self.config.drain_timeout_ms
        started = time.monotonic()

        while not self.is_idle:
            if timeout_ms is not None and (time.monotonic() - started) * 1000.0 >= timeout_ms:
                return False
            time.sleep(interval)

        return True

    def _consumer_loop(self) -> None:
        """Worker loop that feeds queued events to the change processor."""
        logger.debug("Change consumer loop started")

        while True:
            event = self._queue.get()
            if event is _STOP:
                break

            try:
                self.processor.handle(event)
            finally:
                with self._lock:
                    self._pending -= 1
