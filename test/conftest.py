import threading
import time

import pytest
from loguru import logger

import painlab_nidaq.util
from painlab_nidaq.device import MockDAQ
from painlab_nidaq.types import ChannelConfig, SwitchChannelMethod
from painlab_nidaq.util import TEST_LOGLEVEL


def pytest_configure(config):
    """Configure custom markers."""
    config.addinivalue_line("markers", "slow: marks test as slow running test")
    config.addinivalue_line(
        "markers", "hardware: marks test that require physical hardware"
    )


class RecordingTransport:
    """In-memory transport; records everything the core sends."""

    def __init__(self):
        self.descriptors: list[bytes] = []
        self.frames: list[bytes] = []
        self.errors: list[str] = []
        self.handler = None
        self._lock = threading.Lock()

    def send_bytes(self, blob: bytes) -> None:
        self.descriptors.append(blob)

    def push_frame(self, blob: bytes) -> None:
        with self._lock:
            self.frames.append(blob)

    def report_error(self, message: str) -> None:
        self.errors.append(message)

    def set_control_handler(self, handler) -> None:
        self.handler = handler

    def deliver(self, payload: bytes):
        """Act as the hub: hand a control message to the core."""
        self.handler(payload, len(payload))

    def wait_for_frames(self, n: int, timeout: float = 5.0) -> bool:
        deadline = time.monotonic() + timeout
        while time.monotonic() < deadline:
            with self._lock:
                if len(self.frames) >= n:
                    return True
            time.sleep(0.005)
        return False


@pytest.fixture(autouse=True, scope="session")
def test_log():
    painlab_nidaq.util.start_device_log(
        log_to_file=False, log_to_stdout=True, log_level=TEST_LOGLEVEL
    )
    yield
    painlab_nidaq.util.shutdown_log()


@pytest.fixture(autouse=True, scope="function")
def log(request):
    logger.warning("STARTED Test '{}'".format(request.node.originalname))

    def fin():
        logger.warning("COMPLETED Test '{}' \n".format(request.node.originalname))

    request.addfinalizer(fin)


@pytest.fixture()
def single_config() -> ChannelConfig:
    return ChannelConfig(device_name="Dev1", settle_delay_s=0.0)


@pytest.fixture()
def dual_config() -> ChannelConfig:
    return ChannelConfig(
        device_name="Dev1",
        switch_channel_method=SwitchChannelMethod.DUAL,
        settle_delay_s=0.0,
    )


@pytest.fixture()
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture()
def single_daq(single_config) -> MockDAQ:
    daq = MockDAQ(auto=False, channel_config=single_config)
    daq.open()
    yield daq
    daq.close()


@pytest.fixture()
def dual_daq(dual_config) -> MockDAQ:
    daq = MockDAQ(auto=False, channel_config=dual_config)
    daq.open()
    yield daq
    daq.close()
