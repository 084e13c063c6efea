# -*- coding: utf-8 -*-
"""
DAQ device implementations.

- :class:`NIDAQStimulator`: National Instruments hardware via ``nidaqmx``
- :class:`MockDAQ`: software stand-in used for tests and ``--mock`` runs

Both satisfy :class:`painlab_nidaq.types.StimulatorDAQProtocol`.

Examples
--------
```python
from painlab_nidaq.device import MockDAQ
from painlab_nidaq.types import ChannelConfig
daq = MockDAQ(channel_config=ChannelConfig(device_name="Dev1"))
daq.open()
```
"""

from .device import Device
from .mock import MockDAQ


def get_nidaq_stimulator_class():
    """Import the NI-DAQmx device lazily (nidaqmx loads the driver runtime)."""
    from .nidaq import NIDAQStimulator

    return NIDAQStimulator


__all__ = ["Device", "MockDAQ", "get_nidaq_stimulator_class"]
