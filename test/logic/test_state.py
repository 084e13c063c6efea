import threading

import pytest

from painlab_nidaq.core import DEFAULT_PULSE_LENGTH_MS, ProtocolState, StateCell
from painlab_nidaq.types import ChannelConfig, ConfigError, SwitchChannelMethod


class TestProtocolState:
    def test_defaults(self):
        state = ProtocolState()
        assert state.selected_channel == 0
        assert state.pulse_length == DEFAULT_PULSE_LENGTH_MS
        assert state.last_timestamp == -1
        assert state.output_success

    @pytest.mark.parametrize("length", [0, 501])
    def test_length_bounds(self, length):
        with pytest.raises(ValueError):
            ProtocolState(pulse_length=length)

    def test_evolve_is_a_copy(self):
        state = ProtocolState()
        changed = state.evolve(selected_channel=1)
        assert state.selected_channel == 0
        assert changed.selected_channel == 1


class TestStateCell:
    def test_publish_and_snapshot(self):
        cell = StateCell()
        new = ProtocolState(last_timestamp=10)
        cell.publish(new)
        assert cell.snapshot() is new

    def test_timestamp_cannot_go_back(self):
        cell = StateCell(ProtocolState(last_timestamp=10))
        with pytest.raises(ValueError):
            cell.publish(ProtocolState(last_timestamp=9))
        assert cell.snapshot().last_timestamp == 10

    def test_readers_see_whole_snapshots(self):
        cell = StateCell()
        stop = threading.Event()
        torn = []

        def reader():
            while not stop.is_set():
                s = cell.snapshot()
                # every published snapshot has pulse_length == last_timestamp
                if s.last_timestamp != -1 and s.pulse_length != s.last_timestamp:
                    torn.append(s)

        t = threading.Thread(target=reader)
        t.start()
        for i in range(1, 501):
            cell.publish(ProtocolState(pulse_length=i, last_timestamp=i))
        stop.set()
        t.join()
        assert not torn


class TestChannelConfig:
    def test_single_layout(self):
        cfg = ChannelConfig(device_name="Dev1")
        assert cfg.n_input_channels == 2
        assert cfg.input_channels == "Dev1/ai0:1"
        assert cfg.output_channels == "Dev1/ao0"
        assert cfg.switch_line_channels is None

    def test_dual_layout(self):
        cfg = ChannelConfig(
            device_name="Dev2", switch_channel_method=SwitchChannelMethod.DUAL
        )
        assert cfg.n_stim_channels == 2
        assert cfg.n_input_channels == 4
        assert cfg.output_channels == "Dev2/ao0:1"

    def test_explicit_channels(self):
        cfg = ChannelConfig(device_name="Dev1", ai_channels="Dev1/ai4:5")
        assert cfg.input_channels == "Dev1/ai4:5"

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"device_name": ""},
            {"device_name": "Dev1", "samples_per_frame": 0},
            {"device_name": "Dev1", "buffer_size": 5},
            {"device_name": "Dev1", "settle_delay_s": -0.1},
        ],
    )
    def test_invalid(self, kwargs):
        with pytest.raises(ConfigError):
            ChannelConfig(**kwargs)

    def test_with_settle_delay(self):
        cfg = ChannelConfig(device_name="Dev1").with_settle_delay(0.0)
        assert cfg.settle_delay_s == 0.0
        assert cfg.device_name == "Dev1"
