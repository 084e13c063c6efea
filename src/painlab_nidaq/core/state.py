"""Shared protocol state and its publication cell.

The control thread is the only writer; the acquisition callback only reads.
State is an immutable snapshot and writers swap the cell's reference, so a
reader always sees one consistent snapshot without taking a lock.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, replace

from painlab_nidaq.types import UNSET_TIMESTAMP

from .waveform import MAX_PULSE_LENGTH_MS, MIN_PULSE_LENGTH_MS

DEFAULT_PULSE_LENGTH_MS = 25


@dataclass(frozen=True)
class ProtocolState:
    selected_channel: int = 0
    pulse_length: int = DEFAULT_PULSE_LENGTH_MS  # ms
    last_timestamp: int = UNSET_TIMESTAMP  # epoch ms of the last shock
    output_success: bool = True

    def __post_init__(self):
        if not MIN_PULSE_LENGTH_MS <= self.pulse_length <= MAX_PULSE_LENGTH_MS:
            raise ValueError(f"pulse_length {self.pulse_length} outside [1, 500]")
        if self.selected_channel < 0:
            raise ValueError(f"selected_channel {self.selected_channel} is negative")

    def evolve(self, **changes) -> ProtocolState:
        return replace(self, **changes)


class StateCell:
    """Holds the current :class:`ProtocolState` snapshot."""

    def __init__(self, initial: ProtocolState | None = None):
        self._state = initial if initial is not None else ProtocolState()
        self._write_lock = threading.Lock()

    def snapshot(self) -> ProtocolState:
        # a single reference read; the snapshot itself is immutable
        return self._state

    def publish(self, new_state: ProtocolState) -> ProtocolState:
        with self._write_lock:
            if new_state.last_timestamp < self._state.last_timestamp:
                raise ValueError(
                    "last_timestamp must not decrease: "
                    f"{self._state.last_timestamp} -> {new_state.last_timestamp}"
                )
            self._state = new_state
            return new_state
