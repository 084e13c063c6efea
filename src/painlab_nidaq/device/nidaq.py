"""NI-DAQmx implementation of the stimulator DAQ.

Three tasks are used:

- an analog input task, continuously clocked, reading (current, voltage)
  loopback pairs and raising an every-N-samples event per frame;
- a finite analog output task generating the stimulation pulse train;
- an optional digital output task driving the channel switch lines (dual mode).

Stimulation waveforms are normalised to [-1, 1] and scaled by
``channel_config.max_volt`` before being written.
"""

from __future__ import annotations

import threading
from typing import Optional, Sequence

import nidaqmx
import numpy as np
from loguru import logger
from nidaqmx.constants import (
    WAIT_INFINITELY,
    AcquisitionType,
    LineGrouping,
    TaskMode,
    TerminalConfiguration,
)
from nidaqmx.errors import DaqError
from nidaqmx.stream_readers import AnalogMultiChannelReader

from painlab_nidaq.device.device import Device
from painlab_nidaq.types import (
    AcquisitionFault,
    ChannelConfig,
    ReadCallback,
    StimulationOutputError,
)


class NIDAQStimulator(Device):
    required_config = {"channel_config": ChannelConfig}
    channel_config: ChannelConfig

    def __init__(self, **config_kwargs):
        super().__init__(**config_kwargs)
        self._ai_task: Optional[nidaqmx.Task] = None
        self._ao_task: Optional[nidaqmx.Task] = None
        self._do_task: Optional[nidaqmx.Task] = None
        self._reader: Optional[AnalogMultiChannelReader] = None
        self._armed: Optional[ReadCallback] = None
        self._arm_lock = threading.Lock()
        self._connected = False
        self._device_name = self.channel_config.device_name

    # ------------------------------------------------------------------
    # Connection
    # ------------------------------------------------------------------

    def open(self) -> tuple[bool, str]:
        cfg = self.channel_config
        try:
            self._ao_task = nidaqmx.Task("StimulationOutput")
            self._ao_task.ao_channels.add_ao_voltage_chan(
                cfg.output_channels, min_val=-cfg.max_volt, max_val=cfg.max_volt
            )
            if cfg.switch_line_channels is not None:
                self._do_task = nidaqmx.Task("StimulationSwitch")
                self._do_task.do_channels.add_do_chan(
                    cfg.switch_line_channels,
                    line_grouping=LineGrouping.CHAN_PER_LINE,
                )
        except DaqError as e:
            logger.exception("Could not open NI device {}.", cfg.device_name)
            self._close_output_tasks()
            return False, f"Could not open NI device {cfg.device_name}: {e}"
        self._connected = True
        logger.info(
            "Opened NI device {} (out: {}, switch: {})",
            cfg.device_name,
            cfg.output_channels,
            cfg.switch_line_channels,
        )
        return True, f"NI device {cfg.device_name} opened"

    def close(self):
        self.release_acquisition()
        self._close_output_tasks()
        self._connected = False
        logger.info("Closed NI device {}", self.channel_config.device_name)

    def is_connected(self) -> bool:
        return self._connected

    def _close_output_tasks(self):
        for task in (self._ao_task, self._do_task):
            if task is None:
                continue
            try:
                task.close()
            except DaqError:
                logger.exception("Error closing task {}.", task.name)
        self._ao_task = None
        self._do_task = None

    # ------------------------------------------------------------------
    # Acquisition
    # ------------------------------------------------------------------

    def start_acquisition(self) -> None:
        cfg = self.channel_config
        try:
            self._ai_task = nidaqmx.Task("StimulationLoopback")
            self._ai_task.ai_channels.add_ai_voltage_chan(
                cfg.input_channels,
                terminal_config=TerminalConfiguration.DEFAULT,
                min_val=-cfg.max_volt,
                max_val=cfg.max_volt,
            )
            self._ai_task.timing.cfg_samp_clk_timing(
                cfg.sample_rate,
                sample_mode=AcquisitionType.CONTINUOUS,
                samps_per_chan=cfg.buffer_size,
            )
            self._ai_task.control(TaskMode.TASK_VERIFY)
            self._reader = AnalogMultiChannelReader(self._ai_task.in_stream)
            self._ai_task.register_every_n_samples_acquired_into_buffer_event(
                cfg.samples_per_frame, self._on_every_n_samples
            )
            self._ai_task.start()
        except DaqError as e:
            self.release_acquisition()
            raise AcquisitionFault(f"Could not start acquisition: {e}") from e
        logger.info(
            "Acquisition started on {} at {} Hz, {} samples per frame",
            cfg.input_channels,
            cfg.sample_rate,
            cfg.samples_per_frame,
        )

    def arm_read(self, callback: ReadCallback) -> None:
        with self._arm_lock:
            self._armed = callback

    def _on_every_n_samples(self, task_handle, event_type, n_samples, callback_data):
        # runs on the driver's event thread
        with self._arm_lock:
            callback, self._armed = self._armed, None
        if callback is not None:
            callback()
        return 0

    def read_into(self, buffer: np.ndarray) -> None:
        if self._reader is None:
            raise AcquisitionFault("Acquisition task is not running")
        try:
            self._reader.read_many_sample(
                buffer, number_of_samples_per_channel=buffer.shape[1]
            )
        except DaqError as e:
            raise AcquisitionFault(f"DAQ read failed: {e}") from e

    def release_acquisition(self) -> None:
        with self._arm_lock:
            self._armed = None
        if self._ai_task is None:
            return
        try:
            self._ai_task.stop()
            self._ai_task.close()
        except DaqError:
            logger.exception("Error releasing acquisition task.")
        self._ai_task = None
        self._reader = None

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def has_digital_switch(self) -> bool:
        return self._do_task is not None

    def n_switch_lines(self) -> int:
        if self._do_task is None:
            return 0
        return self._do_task.number_of_channels

    def write_switch_lines(self, pattern: Sequence[bool]) -> None:
        if self._do_task is None:
            raise StimulationOutputError("No digital switch lines configured")
        try:
            self._do_task.write([bool(p) for p in pattern], auto_start=True)
        except DaqError as e:
            raise StimulationOutputError(f"Switch write failed: {e}") from e

    def write_stimulation(self, waveform: np.ndarray) -> None:
        if self._ao_task is None:
            raise StimulationOutputError("Output task is not open")
        cfg = self.channel_config
        try:
            self._ao_task.stop()
            self._ao_task.timing.cfg_samp_clk_timing(
                cfg.output_sample_rate,
                sample_mode=AcquisitionType.FINITE,
                samps_per_chan=waveform.shape[-1],
            )
            self._ao_task.write(waveform * cfg.max_volt, auto_start=False)
            self._ao_task.start()
        except DaqError as e:
            raise StimulationOutputError(f"Stimulation write failed: {e}") from e

    def wait_until_output_done(self, timeout: Optional[float] = None) -> None:
        if self._ao_task is None:
            raise StimulationOutputError("Output task is not open")
        try:
            self._ao_task.wait_until_done(
                timeout=WAIT_INFINITELY if timeout is None else timeout
            )
            self._ao_task.stop()
        except DaqError as e:
            raise StimulationOutputError(f"Stimulation did not complete: {e}") from e
