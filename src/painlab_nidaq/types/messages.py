"""Frame types exchanged with the PainLab hub.

Control frames encode "no change requested" as -1 on the wire. In Python those
fields are ``None``; the conversion happens only at the (de)serialization
boundary so a genuine 0 is never mistaken for an absent value.
"""

from __future__ import annotations

import json
import numbers
from dataclasses import dataclass, field
from typing import Any, Optional

import numpy as np
from mashumaro.mixins.json import DataClassJSONMixin

from .errors import FrameDecodeError

ABSENT = -1  # wire sentinel: field absent / no change
UNSET_TIMESTAMP = -1


def _array_to_list(arr: np.ndarray) -> list[float]:
    return np.asarray(arr, dtype=np.float64).tolist()


def _list_to_array(seq) -> np.ndarray:
    return np.asarray(seq, dtype=np.float64)


@dataclass
class Frame(DataClassJSONMixin):
    """Base class for all frames."""

    def to_bytes(self) -> bytes:
        return self.to_json().encode("utf-8")

    def __repr__(self):
        msg = self.__class__.__name__ + "("
        for i, (field, val) in enumerate(self.__dict__.items()):
            if i not in (0, len(self.__dict__)):
                msg += ", "
            if isinstance(val, np.ndarray):
                msg += f"{field}=<Array[{val.size}]>"
            else:
                msg += f"{field}={getattr(self, field)}"
        return msg + ")"


@dataclass(kw_only=True, repr=False)
class StimulationControlFrame(Frame):
    """Inbound command: change amplitude, pulse length and/or active channel.

    Any subset of the fields may be present; ``None`` means "keep as is".
    """

    normalised_current_level: Optional[float] = None
    stimulation_length: Optional[int] = None  # ms
    switch_channel: Optional[int] = None

    _OPTIONAL_FIELDS = (
        "normalised_current_level",
        "stimulation_length",
        "switch_channel",
    )

    def __post_init__(self):
        if self.normalised_current_level is not None:
            level = _as_number("normalised_current_level", self.normalised_current_level)
            if not -1.0 <= level <= 1.0:
                raise ValueError(
                    f"normalised_current_level {level} outside [-1, 1]"
                )
            self.normalised_current_level = level
        if self.stimulation_length is not None:
            self.stimulation_length = _as_integer(
                "stimulation_length", self.stimulation_length
            )
        if self.switch_channel is not None:
            self.switch_channel = _as_integer("switch_channel", self.switch_channel)
            if self.switch_channel < 0:
                raise ValueError(f"switch_channel {self.switch_channel} is negative")

    @classmethod
    def __pre_deserialize__(cls, d: dict[Any, Any]) -> dict[Any, Any]:
        out = {}
        for k, v in d.items():
            if k in cls._OPTIONAL_FIELDS:
                if _is_absent(v):
                    v = None
                elif k == "normalised_current_level":
                    v = _as_number(k, v)
                else:
                    v = _as_integer(k, v)
            out[k] = v
        return out

    def __post_serialize__(self, d: dict[Any, Any]) -> dict[Any, Any]:
        for k in self._OPTIONAL_FIELDS:
            if d.get(k) is None:
                d[k] = ABSENT
        return d

    @classmethod
    def decode(cls, raw: bytes, n_bytes: Optional[int] = None) -> StimulationControlFrame:
        """Decode the first ``n_bytes`` of ``raw`` (UTF-8 JSON) into a frame."""
        if n_bytes is not None:
            raw = raw[:n_bytes]
        try:
            d = json.loads(raw.decode("utf-8"))
            if not isinstance(d, dict):
                raise ValueError(f"expected a JSON object, got {type(d).__name__}")
            return cls.from_dict(d)
        except Exception as e:
            raise FrameDecodeError(f"could not decode control frame: {e}") from e

    def is_empty(self) -> bool:
        """True when no field requests a change."""
        return all(getattr(self, k) is None for k in self._OPTIONAL_FIELDS)


def _as_number(name: str, value) -> float:
    # JSON true/false and strings are not numbers on the wire
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise ValueError(f"{name} must be a number, got {value!r}")
    return float(value)


def _as_integer(name: str, value) -> int:
    number = _as_number(name, value)
    if not number.is_integer():
        raise ValueError(f"{name} must be an integer, got {value!r}")
    return int(number)


def _is_absent(value) -> bool:
    return (
        value is None
        or (isinstance(value, (int, float)) and not isinstance(value, bool) and value == ABSENT)
    )


@dataclass(kw_only=True, repr=False)
class StimulationDataFrame(Frame):
    """Outbound telemetry for one acquisition cycle."""

    stimulation_current_loopback: np.ndarray = field(
        metadata={"serialize": _array_to_list, "deserialize": _list_to_array}
    )
    stimulation_voltage: np.ndarray = field(
        metadata={"serialize": _array_to_list, "deserialize": _list_to_array}
    )
    last_shock_on_device: int = UNSET_TIMESTAMP  # epoch ms

    @classmethod
    def from_buffer(
        cls, buffer: np.ndarray, offset: int, last_shock_on_device: int
    ) -> StimulationDataFrame:
        """Build a frame from rows ``offset`` (current) and ``offset + 1`` (voltage)."""
        return cls(
            stimulation_current_loopback=buffer[offset].copy(),
            stimulation_voltage=buffer[offset + 1].copy(),
            last_shock_on_device=int(last_shock_on_device),
        )
