# -*- coding: utf-8 -*-
"""# painlab-nidaq

PainLab device bridge for an NI-DAQ based electrical stimulator.

The device process streams current/voltage loopback samples to the PainLab hub
and applies the hub's control frames (stimulation amplitude, pulse length,
channel switch) to the hardware.

- [core](core/index.html): acquisition and control loops, waveform synthesis
- [device](device/index.html): NI-DAQmx and mock hardware
- [server](server/index.html): hub transport and process bootstrap
- [types](types/index.html): frames, configuration, protocols, exceptions
"""

from ._version import __version__
