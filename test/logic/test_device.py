import numpy as np
import pytest

from painlab_nidaq.device import MockDAQ
from painlab_nidaq.types import (
    AcquisitionFault,
    StimulationOutputError,
    StimulatorDAQProtocol,
)


class TestMockDAQ:
    def test_protocol(self, single_daq):
        assert isinstance(single_daq, StimulatorDAQProtocol)

    def test_missing_config(self):
        with pytest.raises(ValueError):
            MockDAQ()

    def test_wrong_config_type(self):
        with pytest.raises(ValueError):
            MockDAQ(channel_config={"device_name": "Dev1"})

    def test_switch_lines(self, single_daq, dual_daq):
        assert not single_daq.has_digital_switch()
        assert single_daq.n_switch_lines() == 0
        assert dual_daq.has_digital_switch()
        assert dual_daq.n_switch_lines() == 2

    def test_read_without_acquisition(self, single_daq):
        with pytest.raises(AcquisitionFault):
            single_daq.read_into(np.zeros((2, 10)))

    def test_write_faults(self, single_daq):
        single_daq.fail_writes = True
        with pytest.raises(StimulationOutputError):
            single_daq.write_stimulation([0.0] * 500)
        with pytest.raises(StimulationOutputError):
            single_daq.write_switch_lines([True])

    def test_fire_without_arm(self, single_config):
        daq = MockDAQ(auto=False, channel_config=single_config)
        daq.open()
        daq.start_acquisition()
        assert not daq.fire()
