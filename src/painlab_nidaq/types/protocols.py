"""Interfaces the protocol core consumes.

The core never talks to NI-DAQmx or ZeroMQ directly. It is handed objects that
satisfy these protocols, which keeps the concurrency logic testable against
:class:`painlab_nidaq.device.MockDAQ` and an in-memory transport.

Both protocols are ``@runtime_checkable`` so :class:`ProtocolCore` can reject
a wrongly wired collaborator at construction time.
"""

from __future__ import annotations

from typing import Callable, Optional, Protocol, Sequence, runtime_checkable

import numpy as np

ControlHandler = Callable[[bytes, int], None]
ReadCallback = Callable[[], None]


@runtime_checkable
class StimulatorDAQProtocol(Protocol):
    """Methods required of the stimulator's DAQ hardware.

    Acquisition is one-shot and re-armed: ``arm_read`` schedules a single
    callback for the next filled buffer, the callback copies the samples out
    with ``read_into`` and arms the next read. Read failures raise
    :class:`~painlab_nidaq.types.AcquisitionFault`, write failures raise
    :class:`~painlab_nidaq.types.StimulationOutputError`.
    """

    def open(self) -> tuple[bool, str]: ...

    def close(self) -> None: ...

    def is_connected(self) -> bool: ...

    def start_acquisition(self) -> None:
        """Configure and start the continuously clocked analog input task."""
        ...

    def arm_read(self, callback: ReadCallback) -> None:
        """Call ``callback`` once, from the driver thread, when the next frame is ready."""
        ...

    def read_into(self, buffer: np.ndarray) -> None:
        """Fill ``buffer`` (n_channels x samples_per_frame) in place."""
        ...

    def release_acquisition(self) -> None:
        """Stop and dispose of the analog input task."""
        ...

    def has_digital_switch(self) -> bool: ...

    def n_switch_lines(self) -> int: ...

    def write_switch_lines(self, pattern: Sequence[bool]) -> None: ...

    def write_stimulation(self, waveform: np.ndarray) -> None:
        """Stop any running output, load ``waveform`` and start generating it."""
        ...

    def wait_until_output_done(self, timeout: Optional[float] = None) -> None:
        """Block until the hardware reports the loaded waveform was generated."""
        ...


@runtime_checkable
class TransportProtocol(Protocol):
    """Link between the device process and the PainLab hub."""

    def send_bytes(self, blob: bytes) -> None:
        """Send the device descriptor (once, at registration)."""
        ...

    def push_frame(self, blob: bytes) -> None:
        """Send one serialized data frame."""
        ...

    def report_error(self, message: str) -> None:
        """Surface a protocol-level failure to the hub/operator."""
        ...

    def set_control_handler(self, handler: ControlHandler) -> None:
        """Register the callback receiving (raw bytes, byte count) per control message."""
        ...
