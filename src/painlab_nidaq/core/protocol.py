"""Protocol core: shared state plus the acquisition and control paths.

```
DAQ buffer filled --> AcquisitionLoop --(snapshot)--> push_frame --> transport
transport --> on_control_bytes --> ControlLoop --> ControlFrameApplicator --> DAQ
                                        |
                                        +--> StateCell.publish(new snapshot)
```

The transport and the DAQ device are injected; nothing here subclasses a
protocol framework.
"""

from __future__ import annotations

from typing import Optional

from loguru import logger

from painlab_nidaq.types import (
    ChannelConfig,
    StimulatorDAQProtocol,
    TransportProtocol,
)

from .acquisition import AcquisitionLoop
from .applicator import ControlFrameApplicator
from .control import ControlLoop
from .state import ProtocolState, StateCell


class ProtocolCore:
    """Owns the shared :class:`ProtocolState` and wires both loops together.

    Parameters
    ----------
    channel_config : ChannelConfig
        Static channel layout.
    device : StimulatorDAQProtocol
        DAQ hardware (or mock).
    transport : TransportProtocol
        Link to the hub.
    descriptor : bytes
        Device descriptor, sent verbatim on :meth:`start`.
    settle_delay_s : float, optional
        Overrides ``channel_config.settle_delay_s``.
    initial_state : ProtocolState, optional
        Defaults to ``ProtocolState()``.
    """

    def __init__(
        self,
        channel_config: ChannelConfig,
        device: StimulatorDAQProtocol,
        transport: TransportProtocol,
        descriptor: bytes,
        settle_delay_s: Optional[float] = None,
        initial_state: Optional[ProtocolState] = None,
    ):
        if not isinstance(device, StimulatorDAQProtocol):
            raise TypeError(
                f"{device.__class__.__name__} does not implement StimulatorDAQProtocol"
            )
        if not isinstance(transport, TransportProtocol):
            raise TypeError(
                f"{transport.__class__.__name__} does not implement TransportProtocol"
            )
        self.channel_config = channel_config
        self.device = device
        self.transport = transport
        self.descriptor = descriptor
        self.state_cell = StateCell(initial_state)
        self.applicator = ControlFrameApplicator(
            device, channel_config, settle_delay_s=settle_delay_s
        )
        self.control_loop = ControlLoop(
            self.applicator, self.state_cell, transport.report_error
        )
        self.acquisition_loop = AcquisitionLoop(
            device, channel_config, self.state_cell.snapshot, transport.push_frame
        )
        self._started = False

    @property
    def state(self) -> ProtocolState:
        return self.state_cell.snapshot()

    def start(self):
        """Open the device, register with the hub and start both loops."""
        if self._started:
            raise RuntimeError("Protocol core already started")
        ok, msg = self.device.open()
        if not ok:
            logger.error("Device open failed: {}", msg)
            raise RuntimeError(msg)
        logger.info(msg)

        self.transport.set_control_handler(self.on_control_bytes)
        self.transport.send_bytes(self.descriptor)
        logger.info(
            "Registered device {} ({} channel mode)",
            self.channel_config.device_name,
            self.channel_config.switch_channel_method.value,
        )

        self.control_loop.start()
        try:
            self.acquisition_loop.start()
        except Exception:
            logger.exception("Could not start acquisition.")
            self.control_loop.stop(timeout=5.0)
            self.device.close()
            raise
        self._started = True

    def stop(self):
        if not self._started:
            return
        self.acquisition_loop.stop()
        self.control_loop.stop(timeout=5.0)
        self.device.close()
        self._started = False
        logger.info("Protocol core stopped.")

    def on_control_bytes(self, raw: bytes, n_bytes: int):
        """Entry point for inbound control messages (any thread)."""
        self.control_loop.submit(raw, n_bytes)

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc_value, tb):
        self.stop()
