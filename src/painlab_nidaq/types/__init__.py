"""
Types shared across painlab_nidaq: configuration, wire frames, collaborator
protocols and exceptions.

Examples
--------
Decoding a control frame from the hub:
```python
from painlab_nidaq.types import StimulationControlFrame
frame = StimulationControlFrame.decode(b'{"normalised_current_level": 0.5}')
assert frame.stimulation_length is None  # absent on the wire
```

See Also
--------
painlab_nidaq.types.messages : Frame definitions
painlab_nidaq.types.protocols : Device and transport protocols
painlab_nidaq.types.config : Channel and network configuration
"""

from .config import ChannelConfig, NetworkConfig, SwitchChannelMethod
from .errors import (
    AcquisitionFault,
    CommsError,
    ConfigError,
    ControlApplyError,
    FrameDecodeError,
    PainlabError,
    StimulationOutputError,
)
from .messages import (
    ABSENT,
    UNSET_TIMESTAMP,
    Frame,
    StimulationControlFrame,
    StimulationDataFrame,
)
from .protocols import (
    ControlHandler,
    ReadCallback,
    StimulatorDAQProtocol,
    TransportProtocol,
)

__all__ = [
    "ABSENT",
    "UNSET_TIMESTAMP",
    "AcquisitionFault",
    "ChannelConfig",
    "CommsError",
    "ConfigError",
    "ControlApplyError",
    "ControlHandler",
    "Frame",
    "FrameDecodeError",
    "NetworkConfig",
    "PainlabError",
    "ReadCallback",
    "StimulationControlFrame",
    "StimulationDataFrame",
    "StimulationOutputError",
    "StimulatorDAQProtocol",
    "SwitchChannelMethod",
    "TransportProtocol",
]
