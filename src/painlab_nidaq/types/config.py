"""Configuration types for the device process."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from mashumaro import DataClassDictMixin

from painlab_nidaq.util.defaults import (
    DEFAULT_BUFFER_SIZE,
    DEFAULT_HOST_ADDR,
    DEFAULT_MAX_VOLT,
    DEFAULT_OUTPUT_SAMPLE_RATE,
    DEFAULT_OUTPUT_TIMEOUT_S,
    DEFAULT_PORT,
    DEFAULT_SAMPLE_RATE,
    DEFAULT_SAMPLES_PER_FRAME,
    DEFAULT_SETTLE_DELAY_S,
)

from .errors import ConfigError


class SwitchChannelMethod(str, Enum):
    """How stimulation channels are selected.

    SINGLE: one stimulation channel, one current/voltage loopback pair.
    DUAL: two stimulation channels behind a digital switch, two loopback pairs.
    """

    SINGLE = "single"
    DUAL = "dual"


@dataclass(frozen=True, kw_only=True)
class ChannelConfig(DataClassDictMixin):
    """Static channel layout of the DAQ device. Loaded once, read-only after.

    Only ``device_name`` is required. Physical channel strings default to
    the standard wiring on ``device_name`` when omitted:

    ============  ==================  ======================
    mode          analog in           analog out / switch
    ============  ==================  ======================
    single        ``<dev>/ai0:1``     ``<dev>/ao0`` / none
    dual          ``<dev>/ai0:3``     ``<dev>/ao0:1`` / ``<dev>/port0/line0:1``
    ============  ==================  ======================

    Analog inputs are ordered as (current, voltage) pairs, one pair per
    stimulation channel.
    """

    device_name: str
    switch_channel_method: SwitchChannelMethod = SwitchChannelMethod.SINGLE
    sample_rate: float = DEFAULT_SAMPLE_RATE
    samples_per_frame: int = DEFAULT_SAMPLES_PER_FRAME
    buffer_size: int = DEFAULT_BUFFER_SIZE
    max_volt: float = DEFAULT_MAX_VOLT
    output_sample_rate: float = DEFAULT_OUTPUT_SAMPLE_RATE
    settle_delay_s: float = DEFAULT_SETTLE_DELAY_S
    output_timeout_s: Optional[float] = DEFAULT_OUTPUT_TIMEOUT_S
    ai_channels: Optional[str] = None
    ao_channels: Optional[str] = None
    switch_lines: Optional[str] = None

    def __post_init__(self):
        if not self.device_name:
            raise ConfigError("device_name must not be empty")
        if self.sample_rate <= 0 or self.output_sample_rate <= 0:
            raise ConfigError("sample rates must be positive")
        if self.samples_per_frame <= 0:
            raise ConfigError("samples_per_frame must be positive")
        if self.buffer_size < self.samples_per_frame:
            raise ConfigError("buffer_size must hold at least one frame")
        if self.max_volt <= 0:
            raise ConfigError("max_volt must be positive")
        if self.settle_delay_s < 0:
            raise ConfigError("settle_delay_s must not be negative")

    @property
    def is_dual(self) -> bool:
        return self.switch_channel_method == SwitchChannelMethod.DUAL

    @property
    def n_stim_channels(self) -> int:
        return 2 if self.is_dual else 1

    @property
    def n_input_channels(self) -> int:
        # one (current, voltage) pair per stimulation channel
        return 2 * self.n_stim_channels

    @property
    def input_channels(self) -> str:
        if self.ai_channels:
            return self.ai_channels
        return f"{self.device_name}/ai0:{self.n_input_channels - 1}"

    @property
    def output_channels(self) -> str:
        if self.ao_channels:
            return self.ao_channels
        if self.is_dual:
            return f"{self.device_name}/ao0:1"
        return f"{self.device_name}/ao0"

    @property
    def switch_line_channels(self) -> Optional[str]:
        if self.switch_lines:
            return self.switch_lines
        if self.is_dual:
            return f"{self.device_name}/port0/line0:1"
        return None

    def with_settle_delay(self, settle_delay_s: float) -> ChannelConfig:
        """Copy of this config with a different settle delay."""
        d = self.to_dict()
        d["settle_delay_s"] = settle_delay_s
        return ChannelConfig.from_dict(d)


@dataclass(frozen=True, kw_only=True)
class NetworkConfig(DataClassDictMixin):
    """Where the PainLab hub listens."""

    host: str = DEFAULT_HOST_ADDR
    port: int = DEFAULT_PORT

    @property
    def endpoint(self) -> str:
        return f"tcp://{self.host}:{self.port}"
