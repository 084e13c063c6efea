"""Device base class.

All DAQ devices inherit from :class:`Device`, which validates the keyword
configuration a device is constructed with and defines the connection methods
every device must implement. The methods the protocol core actually drives
are specified by :class:`painlab_nidaq.types.StimulatorDAQProtocol`.
"""

from __future__ import annotations

from typing import Type

from loguru import logger


class Device:
    """Base class for all hardware devices.

    Attributes
    ----------
    required_config : dict[str, Type]
        Required configuration parameters and their types

    Examples
    --------
    ```python
    class MyDAQ(Device):
        required_config = {"channel_config": ChannelConfig}

        def open(self) -> tuple[bool, str]:
            return True, "MyDAQ opened"
    ```
    """

    required_config: dict[str, Type] = {}  # Required configuration keys

    def __init__(self, **config_kwargs):
        for key, value in config_kwargs.items():
            setattr(self, key, value)
        for key, value in self.required_config.items():
            if not hasattr(self, key):
                logger.error(
                    f"Device {self.__class__.__name__} missing required config key: "
                    + f"{key}"
                )
                raise ValueError(
                    f"Device {self.__class__.__name__} missing required config "
                    + f"key: {key}"
                )
            if not isinstance(getattr(self, key), value):
                logger.error(
                    f"Device {self.__class__.__name__} config key {key} "
                    + f"has wrong type: {type(getattr(self, key))} (expected {value})"
                )
                raise ValueError(
                    f"Device {self.__class__.__name__} config key {key} has "
                    + f"wrong type: {type(getattr(self, key))} (expected {value})"
                )

    def open(self) -> tuple[bool, str]:
        raise NotImplementedError()

    def close(self):
        raise NotImplementedError()

    def is_connected(self) -> bool:
        raise NotImplementedError()
