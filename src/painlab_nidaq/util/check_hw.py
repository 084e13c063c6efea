# -*- coding: utf-8 -*-

from loguru import logger


def list_daq_devices() -> dict[str, dict[str, str]]:
    """Return the NI-DAQmx devices known to the local driver.

    Maps device name (e.g. "Dev1") to its product type and serial number.
    Empty when the driver runtime is missing.
    """
    import nidaqmx.system
    from nidaqmx.errors import DaqError, DaqNotFoundError

    devices = {}
    try:
        for dev in nidaqmx.system.System.local().devices:
            devices[dev.name] = {
                "product_type": dev.product_type,
                "serial_num": f"{dev.serial_num:X}",
            }
    except (DaqError, DaqNotFoundError) as e:
        logger.warning("Could not query NI-DAQmx devices: {}", e)
    return devices
