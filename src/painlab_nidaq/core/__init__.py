"""
The acquisition/control orchestration engine.

- :mod:`~painlab_nidaq.core.waveform` pulse-train synthesis
- :mod:`~painlab_nidaq.core.state` shared state snapshots
- :mod:`~painlab_nidaq.core.applicator` applying one control frame
- :mod:`~painlab_nidaq.core.acquisition` the re-arming read loop
- :mod:`~painlab_nidaq.core.control` the serializing control thread
- :mod:`~painlab_nidaq.core.protocol` wiring it all together

Examples
--------
```python
from painlab_nidaq.core import ProtocolCore
core = ProtocolCore(channel_config, MockDAQ(channel_config=channel_config),
                    transport, descriptor=b"{}")
with core:
    core.on_control_bytes(b'{"normalised_current_level": 0.3}', 33)
```
"""

from .acquisition import ACQ_STATE, AcquisitionLoop, channel_offset
from .applicator import ControlFrameApplicator, utc_now_ms
from .control import CONTROL_FAILURE_MESSAGE, CONTROL_STATE, ControlLoop
from .protocol import ProtocolCore
from .state import DEFAULT_PULSE_LENGTH_MS, ProtocolState, StateCell
from .waveform import (
    MAX_PULSE_LENGTH_MS,
    MIN_PULSE_LENGTH_MS,
    PULSE_BUFFER_SAMPLES,
    PULSE_PERIOD_SAMPLES,
    PULSE_TEMPLATE,
    clamp_pulse_length,
    generate_pulse_waveform,
)

__all__ = [
    "ACQ_STATE",
    "CONTROL_FAILURE_MESSAGE",
    "CONTROL_STATE",
    "DEFAULT_PULSE_LENGTH_MS",
    "MAX_PULSE_LENGTH_MS",
    "MIN_PULSE_LENGTH_MS",
    "PULSE_BUFFER_SAMPLES",
    "PULSE_PERIOD_SAMPLES",
    "PULSE_TEMPLATE",
    "AcquisitionLoop",
    "ControlFrameApplicator",
    "ControlLoop",
    "ProtocolCore",
    "ProtocolState",
    "StateCell",
    "channel_offset",
    "clamp_pulse_length",
    "generate_pulse_waveform",
    "utc_now_ms",
]
