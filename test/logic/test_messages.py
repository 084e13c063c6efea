import json

import numpy as np
import pytest

from painlab_nidaq.types import (
    ABSENT,
    ControlApplyError,
    FrameDecodeError,
    StimulationControlFrame,
    StimulationDataFrame,
)


class TestControlFrame:
    def test_decode_all_fields(self):
        raw = b'{"normalised_current_level": 0.5, "stimulation_length": 50, "switch_channel": 1}'
        frame = StimulationControlFrame.decode(raw)
        assert frame.normalised_current_level == 0.5
        assert frame.stimulation_length == 50
        assert frame.switch_channel == 1
        assert not frame.is_empty()

    def test_sentinel_means_absent(self):
        raw = json.dumps(
            {
                "normalised_current_level": ABSENT,
                "stimulation_length": ABSENT,
                "switch_channel": ABSENT,
            }
        ).encode()
        frame = StimulationControlFrame.decode(raw)
        assert frame.is_empty()

    def test_missing_fields_are_absent(self):
        frame = StimulationControlFrame.decode(b'{"stimulation_length": 100}')
        assert frame.normalised_current_level is None
        assert frame.switch_channel is None
        assert frame.stimulation_length == 100

    def test_zero_is_a_value(self):
        frame = StimulationControlFrame.decode(
            b'{"normalised_current_level": 0, "switch_channel": 0}'
        )
        assert frame.normalised_current_level == 0.0
        assert frame.switch_channel == 0

    def test_decode_respects_byte_count(self):
        raw = b'{"stimulation_length": 30}garbage'
        frame = StimulationControlFrame.decode(raw, n_bytes=len(raw) - len(b"garbage"))
        assert frame.stimulation_length == 30

    @pytest.mark.parametrize(
        "raw",
        [
            b"not json",
            b"[1, 2, 3]",
            b'{"normalised_current_level": 1.5}',
            b'{"switch_channel": -3}',
            b"\xff\xfe",
            b'{"normalised_current_level": true}',
            b'{"normalised_current_level": "0.5"}',
            b'{"stimulation_length": "40"}',
            b'{"switch_channel": 0.7}',
            b'{"stimulation_length": 12.5}',
        ],
    )
    def test_decode_errors(self, raw):
        with pytest.raises(FrameDecodeError):
            StimulationControlFrame.decode(raw)

    def test_integral_float_accepted(self):
        frame = StimulationControlFrame.decode(
            b'{"stimulation_length": 40.0, "switch_channel": 1.0}'
        )
        assert frame.stimulation_length == 40
        assert frame.switch_channel == 1
        assert isinstance(frame.stimulation_length, int)

    def test_constructor_rejects_bool(self):
        with pytest.raises(ValueError):
            StimulationControlFrame(normalised_current_level=True)

    def test_decode_error_is_control_error(self):
        assert issubclass(FrameDecodeError, ControlApplyError)

    def test_serialize_writes_sentinel(self):
        d = json.loads(StimulationControlFrame(stimulation_length=40).to_bytes())
        assert d == {
            "normalised_current_level": ABSENT,
            "stimulation_length": 40,
            "switch_channel": ABSENT,
        }


class TestDataFrame:
    def test_from_buffer_copies_pair(self):
        buffer = np.arange(40, dtype=np.float64).reshape(4, 10)
        frame = StimulationDataFrame.from_buffer(buffer, 2, 1234)
        np.testing.assert_array_equal(frame.stimulation_current_loopback, buffer[2])
        np.testing.assert_array_equal(frame.stimulation_voltage, buffer[3])
        buffer[:] = 0
        assert frame.stimulation_current_loopback[0] == 20.0

    def test_wire_format(self):
        buffer = np.ones((2, 3))
        d = json.loads(StimulationDataFrame.from_buffer(buffer, 0, -1).to_bytes())
        assert d == {
            "stimulation_current_loopback": [1.0, 1.0, 1.0],
            "stimulation_voltage": [1.0, 1.0, 1.0],
            "last_shock_on_device": -1,
        }

    def test_decode_round_trip(self):
        buffer = np.vstack([np.linspace(-1.0, 1.0, 10), np.linspace(0.0, 9.5, 10)])
        blob = StimulationDataFrame.from_buffer(buffer, 0, 1_700_000_000_123).to_bytes()
        frame = StimulationDataFrame.from_json(blob.decode("utf-8"))
        assert isinstance(frame.stimulation_current_loopback, np.ndarray)
        np.testing.assert_allclose(frame.stimulation_current_loopback, buffer[0])
        np.testing.assert_allclose(frame.stimulation_voltage, buffer[1])
        assert frame.last_shock_on_device == 1_700_000_000_123

    def test_repr_hides_arrays(self):
        frame = StimulationDataFrame.from_buffer(np.zeros((2, 10)), 0, 5)
        assert "<Array[10]>" in repr(frame)
        assert "last_shock_on_device=5" in repr(frame)
