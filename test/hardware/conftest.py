import pytest

from painlab_nidaq.system import load_channel_config
from painlab_nidaq.util.check_hw import list_daq_devices


@pytest.fixture(scope="session")
def available_devices():
    """NI-DAQmx devices visible to the local driver."""
    return list_daq_devices()


@pytest.fixture(scope="session")
def hw_channel_config(available_devices):
    """Channel config from the usual search path; skips if its device is absent."""
    cfg = load_channel_config()
    if cfg.device_name not in available_devices:
        pytest.skip(f"NI device {cfg.device_name} not available")
    return cfg.with_settle_delay(0.0)
