from __future__ import annotations

import threading
import types
from typing import Callable

import numpy as np
from loguru import logger

from painlab_nidaq.types import (
    AcquisitionFault,
    ChannelConfig,
    StimulationDataFrame,
    StimulatorDAQProtocol,
)

from .state import ProtocolState

ACQ_STATE = types.SimpleNamespace()
ACQ_STATE.IDLE = "IDLE"
ACQ_STATE.RUNNING = "RUNNING"
ACQ_STATE.STOPPED = "STOPPED"


def channel_offset(channel_config: ChannelConfig, state: ProtocolState) -> int:
    """First buffer row of the active (current, voltage) loopback pair."""
    if channel_config.is_dual:
        return 2 * state.selected_channel
    return 0


class AcquisitionLoop:
    """Hardware-driven read cycle producing one data frame per filled buffer.

    Each cycle runs on the driver's callback thread: read into the loop's own
    buffer, build a frame from the active channel pair and the last shock
    time, hand it to ``push_frame`` and re-arm the next read with the same
    buffer. A hardware fault stops the loop for good (fail-stop); the
    acquisition task is released and nothing is retried.
    """

    def __init__(
        self,
        device: StimulatorDAQProtocol,
        channel_config: ChannelConfig,
        get_state: Callable[[], ProtocolState],
        push_frame: Callable[[bytes], None],
    ):
        self.device = device
        self.channel_config = channel_config
        self._get_state = get_state
        self._push_frame = push_frame
        self._buffer = np.zeros(
            (channel_config.n_input_channels, channel_config.samples_per_frame),
            dtype=np.float64,
        )
        self.state = ACQ_STATE.IDLE
        self.frames_sent = 0
        self.fault: AcquisitionFault | None = None
        self._stopped = threading.Event()

    def start(self):
        if self.state != ACQ_STATE.IDLE:
            raise RuntimeError(f"Acquisition loop cannot start from state {self.state}")
        self.device.start_acquisition()
        self.state = ACQ_STATE.RUNNING
        logger.info(
            "Acquisition loop running ({} channels x {} samples per frame)",
            *self._buffer.shape,
        )
        self.device.arm_read(self._on_buffer_filled)

    def stop(self):
        if self.state == ACQ_STATE.STOPPED:
            return
        self.state = ACQ_STATE.STOPPED
        self.device.release_acquisition()
        self._stopped.set()
        logger.info("Acquisition loop stopped after {} frames", self.frames_sent)

    def is_running(self) -> bool:
        return self.state == ACQ_STATE.RUNNING

    def wait_stopped(self, timeout: float | None = None) -> bool:
        return self._stopped.wait(timeout)

    def _on_buffer_filled(self):
        if self.state != ACQ_STATE.RUNNING:
            return
        try:
            self.device.read_into(self._buffer)
        except AcquisitionFault as e:
            logger.exception("DAQ exception, acquisition stopped permanently.")
            self.fault = e
            self.stop()
            return

        # one snapshot per frame: offset and timestamp always agree
        state = self._get_state()
        frame = StimulationDataFrame.from_buffer(
            self._buffer,
            channel_offset(self.channel_config, state),
            state.last_timestamp,
        )
        try:
            self._push_frame(frame.to_bytes())
        except Exception:
            logger.exception("Error pushing data frame {}.", frame)
        else:
            self.frames_sent += 1
            logger.trace("*DATA* (device->): {}", frame)

        if self.state == ACQ_STATE.RUNNING:
            self.device.arm_read(self._on_buffer_filled)
