from __future__ import annotations

import threading
from typing import Optional, Sequence

import numpy as np
from loguru import logger

from painlab_nidaq.device.device import Device
from painlab_nidaq.types import (
    AcquisitionFault,
    ChannelConfig,
    ReadCallback,
    StimulationOutputError,
)


class MockDAQ(Device):
    """Software stand-in for the NI stimulator DAQ.

    With ``auto=True`` an armed read fires from a timer thread after one frame
    period, like the driver's event thread would. With ``auto=False`` reads only
    fire when :meth:`fire` is called, which keeps tests deterministic.

    Row ``ch`` of every frame is filled with ``ch + 0.001 * frame_number`` so the
    selected loopback pair can be told apart downstream.
    """

    required_config = {"channel_config": ChannelConfig}
    channel_config: ChannelConfig

    def __init__(self, auto: bool = True, **config_kwargs):
        super().__init__(**config_kwargs)
        self._auto = auto
        self._connected = False
        self._acquiring = False
        self._armed: Optional[ReadCallback] = None
        self._lock = threading.Lock()
        self._timer: Optional[threading.Timer] = None
        self._output_running = False

        self.frames_read = 0
        self.fail_next_read = False
        self.fail_writes = False
        self.written_waveforms: list[np.ndarray] = []
        self.switch_writes: list[list[bool]] = []
        self.output_done_calls = 0
        self.acquisition_released = threading.Event()

    def open(self) -> tuple[bool, str]:
        self._connected = True
        return True, "MockDAQ opened"

    def close(self):
        self.release_acquisition()
        self._connected = False

    def is_connected(self) -> bool:
        return self._connected

    # acquisition

    def start_acquisition(self) -> None:
        self._acquiring = True
        self.acquisition_released.clear()
        logger.debug("MockDAQ acquisition started")

    def arm_read(self, callback: ReadCallback) -> None:
        with self._lock:
            if not self._acquiring:
                return
            self._armed = callback
            if self._auto:
                period = (
                    self.channel_config.samples_per_frame
                    / self.channel_config.sample_rate
                )
                self._timer = threading.Timer(period, self.fire)
                self._timer.daemon = True
                self._timer.start()

    def fire(self) -> bool:
        """Deliver the armed read, if any. Returns whether a callback ran."""
        with self._lock:
            callback, self._armed = self._armed, None
        if callback is None:
            return False
        callback()
        return True

    def read_into(self, buffer: np.ndarray) -> None:
        if self.fail_next_read:
            self.fail_next_read = False
            raise AcquisitionFault("MockDAQ read fault")
        if not self._acquiring:
            raise AcquisitionFault("MockDAQ acquisition is not running")
        self.frames_read += 1
        for ch in range(buffer.shape[0]):
            buffer[ch, :] = ch + 0.001 * self.frames_read

    def release_acquisition(self) -> None:
        with self._lock:
            self._acquiring = False
            self._armed = None
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
        self.acquisition_released.set()

    def is_acquiring(self) -> bool:
        return self._acquiring

    # output

    def has_digital_switch(self) -> bool:
        return self.channel_config.switch_line_channels is not None

    def n_switch_lines(self) -> int:
        return self.channel_config.n_stim_channels if self.has_digital_switch() else 0

    def write_switch_lines(self, pattern: Sequence[bool]) -> None:
        if self.fail_writes:
            raise StimulationOutputError("MockDAQ switch write fault")
        self.switch_writes.append([bool(p) for p in pattern])

    def write_stimulation(self, waveform: np.ndarray) -> None:
        if self.fail_writes:
            raise StimulationOutputError("MockDAQ stimulation write fault")
        self._output_running = True
        self.written_waveforms.append(np.array(waveform, copy=True))

    def wait_until_output_done(self, timeout: Optional[float] = None) -> None:
        self.output_done_calls += 1
        self._output_running = False
