"""Line-oriented bridge between a message broker and the listener.

Each input line is a JSON object ``{"id": ..., "headers": {...}, "body": ...}``.
For every message one line ``{"id": ..., "outcome": "ack" | "nack"}`` is
written once it has been processed. Outcomes may be written in a different
order than the messages arrived.
"""

import json
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Optional, TextIO

from pydantic import ValidationError

from notifier.logging import get_logger

from .handler import SubmissionEventListener
from .models import MessageOutcome, QueueMessage

logger = get_logger(__name__, component="listener")


class ListenerBridge:
    """Feeds messages from a stream to a bounded worker pool."""

    def __init__(
        self,
        listener: SubmissionEventListener,
        input_stream: TextIO,
        output_stream: TextIO,
        concurrency: int = 4,
        shutdown_event: Optional[threading.Event] = None,
    ):
        """
        Initialize the bridge.

        Args:
            listener: Handler invoked for each message
            input_stream: Stream of JSON-line messages
            output_stream: Stream receiving JSON-line outcomes
            concurrency: Worker pool size; also the bound on in-flight messages
            shutdown_event: Stops reading new messages when set
        """
        if concurrency < 1:
            raise ValueError(f"concurrency must be at least 1, got: {concurrency}")
        self.listener = listener
        self.input_stream = input_stream
        self.output_stream = output_stream
        self.concurrency = concurrency
        self.shutdown_event = shutdown_event or threading.Event()

        self._slots = threading.BoundedSemaphore(concurrency)
        self._write_lock = threading.Lock()
        self.processed = 0

    def run(self) -> int:
        """
        Process messages until the input is exhausted or shutdown is requested.

        In-flight messages are always completed before returning.

        Returns:
            Number of messages whose outcome was written
        """
        logger.info(
            f"Listener started with concurrency {self.concurrency}",
            extra={"event": "listener.started", "concurrency": self.concurrency},
        )

        with ThreadPoolExecutor(
            max_workers=self.concurrency, thread_name_prefix="listener"
        ) as executor:
            for line in self.input_stream:
                if self.shutdown_event.is_set():
                    break
                line = line.strip()
                if not line:
                    continue

                message = self._parse(line)
                if message is None:
                    continue

                self._slots.acquire()
                future = executor.submit(self.listener.handle, message)
                future.add_done_callback(lambda f, m=message: self._complete(m, f))

        logger.info(
            f"Listener stopped after {self.processed} messages",
            extra={"event": "listener.stopped", "processed": self.processed},
        )
        return self.processed

    def _parse(self, line: str) -> Optional[QueueMessage]:
        try:
            return QueueMessage.model_validate_json(line)
        except ValidationError as e:
            logger.error(
                f"Discarding malformed queue message: {e.error_count()} errors",
                extra={"event": "listener.message.malformed", "line_length": len(line)},
            )
        message_id = self._message_id(line)
        if message_id is not None:
            self._write(message_id, MessageOutcome.ACK)
        return None

    @staticmethod
    def _message_id(line: str) -> Optional[str]:
        try:
            payload = json.loads(line)
        except ValueError:
            return None
        if isinstance(payload, dict) and isinstance(payload.get("id"), str):
            return payload["id"]
        return None

    def _complete(self, message: QueueMessage, future: Future) -> None:
        try:
            exc = future.exception()
            if exc is not None:
                logger.error(
                    f"Listener failed on message {message.id}: {exc}",
                    extra={"event": "listener.message.nacked", "error_type": type(exc).__name__},
                )
                outcome = MessageOutcome.NACK
            else:
                outcome = future.result()
            self._write(message.id, outcome)
        finally:
            self._slots.release()

    def _write(self, message_id: str, outcome: MessageOutcome) -> None:
        with self._write_lock:
            self.output_stream.write(
                json.dumps({"id": message_id, "outcome": MessageOutcome(outcome).value}) + "\n"
            )
            self.output_stream.flush()
            self.processed += 1
