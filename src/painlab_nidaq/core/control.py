from __future__ import annotations

import collections
import threading
import types
from typing import Callable, Optional

from loguru import logger

from painlab_nidaq.types import ControlApplyError, StimulationControlFrame

from .applicator import ControlFrameApplicator
from .state import StateCell

CONTROL_STATE = types.SimpleNamespace()
CONTROL_STATE.IDLE = "IDLE"
CONTROL_STATE.APPLYING = "APPLYING"

CONTROL_FAILURE_MESSAGE = "failed to apply control"

class ControlLoop:
    """Serializes application of inbound control messages.

    ``submit`` may be called from any thread (normally the transport's I/O
    thread): it queues the raw bytes and releases the semaphore once. A single
    worker thread takes one message per release, decodes and applies it, then
    publishes the resulting state. Bursts simply queue up while a (blocking)
    stimulation is in progress.
    """

    def __init__(
        self,
        applicator: ControlFrameApplicator,
        state_cell: StateCell,
        report_error: Callable[[str], None],
    ):
        self.applicator = applicator
        self.state_cell = state_cell
        self._report_error = report_error
        self._pending: collections.deque[bytes] = collections.deque()
        self._signal = threading.Semaphore(0)
        self._stop_event = threading.Event()
        self._idle = threading.Condition()
        self._thread: Optional[threading.Thread] = None
        self.state = CONTROL_STATE.IDLE
        self.applied = 0
        self.failed = 0

    def start(self):
        if self._thread is not None:
            raise RuntimeError("Control loop already started")
        self._thread = threading.Thread(
            target=self._run, name="painlab-control", daemon=True
        )
        self._thread.start()
        logger.info("Control loop started")

    def stop(self, timeout: Optional[float] = None):
        self._stop_event.set()
        self._signal.release()  # wake the worker
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
        logger.info(
            "Control loop stopped ({} applied, {} failed)", self.applied, self.failed
        )

    def submit(self, raw: bytes, n_bytes: Optional[int] = None):
        if n_bytes is not None:
            raw = raw[:n_bytes]
        self._pending.append(bytes(raw))
        self._signal.release()

    def wait_idle(self, timeout: Optional[float] = None) -> bool:
        """Block until every submitted message has been processed."""
        with self._idle:
            return self._idle.wait_for(
                lambda: not self._pending and self.state == CONTROL_STATE.IDLE,
                timeout,
            )

    def _run(self):
        while True:
            self._signal.acquire()
            if self._stop_event.is_set():
                break
            # APPLYING before popping, so wait_idle never sees an empty queue early
            self._set_state(CONTROL_STATE.APPLYING)
            try:
                self.process(self._pending.popleft())
            except IndexError:
                pass
            except Exception:
                logger.exception("Error in control loop.")
            finally:
                self._set_state(CONTROL_STATE.IDLE)

    def process(self, raw: bytes):
        """Decode and apply one message, publishing the resulting state."""
        try:
            frame = StimulationControlFrame.decode(raw)
            logger.debug("*CONTROL* (device<-): {}", frame)
            new_state, _ = self.applicator.apply(
                frame, self.state_cell.snapshot()
            )
        except ControlApplyError as e:
            self.failed += 1
            logger.error("Control application failed: {}", e)
            if e.state is not None:
                self.state_cell.publish(e.state)
            self._report_error(CONTROL_FAILURE_MESSAGE)
            return
        except Exception:
            self.failed += 1
            logger.exception("Unexpected error applying control.")
            self._report_error(CONTROL_FAILURE_MESSAGE)
            return

        self.state_cell.publish(new_state)
        self.applied += 1

    def _set_state(self, state: str):
        with self._idle:
            self.state = state
            self._idle.notify_all()
