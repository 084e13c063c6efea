# -*- coding: utf-8 -*-
"""
Device process bootstrap.

Loads the configuration, builds the DAQ device, the hub transport and the
protocol core, then runs until interrupted or until acquisition stops.
"""

from __future__ import annotations

import threading
from datetime import datetime
from pathlib import Path
from typing import Optional

from loguru import logger
from setproctitle import setproctitle

import painlab_nidaq.util
from painlab_nidaq.core import ProtocolCore
from painlab_nidaq.device import MockDAQ, get_nidaq_stimulator_class
from painlab_nidaq.system import DeviceConfig, load_device_config
from painlab_nidaq.types import ChannelConfig, StimulatorDAQProtocol
from painlab_nidaq.util import DEFAULT_LOGLEVEL

from .transport import ZmqTransport


def build_device(channel_config: ChannelConfig, mock: bool = False) -> StimulatorDAQProtocol:
    if mock:
        logger.info("Using MockDAQ in place of {}", channel_config.device_name)
        return MockDAQ(channel_config=channel_config)
    NIDAQStimulator = get_nidaq_stimulator_class()
    return NIDAQStimulator(channel_config=channel_config)


def run_device(
    config_dir: Optional[Path | str] = None,
    mock: bool = False,
    settle_delay_s: Optional[float] = None,
    log_to_file: bool = True,
    log_to_stdout: bool = False,
    log_path: str = "",
    clear_prev_log: bool = True,
    log_level: str = DEFAULT_LOGLEVEL,
    stop_event: Optional[threading.Event] = None,
):
    """Run the device process until ``stop_event`` is set, Ctrl-C, or an
    acquisition fault.
    """
    timestamp = datetime.now().strftime("%Y-%m-%d_%H:%M:%S")
    setproctitle(f"painlab-nidaq_{timestamp}")

    painlab_nidaq.util.start_device_log(
        log_to_file=log_to_file,
        log_to_stdout=log_to_stdout,
        log_path=log_path,
        clear_prev=clear_prev_log,
        log_level=log_level,
    )

    config: DeviceConfig = load_device_config(config_dir)
    channel_config = config.channel
    if settle_delay_s is not None:
        channel_config = channel_config.with_settle_delay(settle_delay_s)

    device = build_device(channel_config, mock=mock)
    transport = ZmqTransport(config.network)
    transport.start()
    core = ProtocolCore(channel_config, device, transport, config.descriptor)

    stop_event = stop_event if stop_event is not None else threading.Event()
    try:
        core.start()
        logger.info("Setup complete, collecting data. Press Ctrl-C to exit.")
        # wake regularly so Ctrl-C is honoured on every platform
        while not stop_event.wait(0.2):
            if not core.acquisition_loop.is_running():
                logger.error("Acquisition stopped: {}", core.acquisition_loop.fault)
                break
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down.")
    finally:
        core.stop()
        transport.close()
        painlab_nidaq.util.shutdown_log()
