"""
Device configuration loading.

See Also
--------
painlab_nidaq.system.sysconfig : File lookup and parsing
"""

from .sysconfig import (
    CHANNEL_CONFIG_FILE,
    CONFIG_FILES,
    DESCRIPTOR_FILE,
    NETWORK_CONFIG_FILE,
    DeviceConfig,
    find_config_file,
    install_default_config,
    load_channel_config,
    load_descriptor,
    load_device_config,
    load_network_config,
    package_config_dir,
)

__all__ = [
    "CHANNEL_CONFIG_FILE",
    "CONFIG_FILES",
    "DESCRIPTOR_FILE",
    "NETWORK_CONFIG_FILE",
    "DeviceConfig",
    "find_config_file",
    "install_default_config",
    "load_channel_config",
    "load_descriptor",
    "load_device_config",
    "load_network_config",
    "package_config_dir",
]
