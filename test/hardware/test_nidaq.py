import threading

import numpy as np
import pytest

from painlab_nidaq.core import generate_pulse_waveform
from painlab_nidaq.device import get_nidaq_stimulator_class
from painlab_nidaq.types import StimulatorDAQProtocol

pytestmark = pytest.mark.hardware


@pytest.fixture()
def daq(hw_channel_config):
    NIDAQStimulator = get_nidaq_stimulator_class()
    device = NIDAQStimulator(channel_config=hw_channel_config)
    ok, msg = device.open()
    assert ok, msg
    yield device
    device.close()


class TestNIDAQStimulator:
    def test_protocol(self, daq):
        assert isinstance(daq, StimulatorDAQProtocol)
        assert daq.is_connected()

    def test_read_cycle(self, daq, hw_channel_config):
        buffer = np.full(
            (hw_channel_config.n_input_channels, hw_channel_config.samples_per_frame),
            np.nan,
        )
        filled = threading.Event()
        daq.start_acquisition()
        try:
            daq.arm_read(filled.set)
            assert filled.wait(5.0)
            daq.read_into(buffer)
        finally:
            daq.release_acquisition()
        assert np.all(np.isfinite(buffer))
        assert np.all(np.abs(buffer) <= hw_channel_config.max_volt * 1.1)

    def test_zero_stimulation(self, daq, hw_channel_config):
        target = 0 if hw_channel_config.is_dual else None
        daq.write_stimulation(generate_pulse_waveform(0.0, 25, target))
        daq.wait_until_output_done(hw_channel_config.output_timeout_s)

    def test_switch(self, daq):
        if not daq.has_digital_switch():
            pytest.skip("no switch lines configured")
        pattern = [i == 0 for i in range(daq.n_switch_lines())]
        daq.write_switch_lines(pattern)
