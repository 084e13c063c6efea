"""Application of a single control frame to the hardware.

ControlFrameApplicator.apply is the only place stimulation is triggered. It
is called from the control loop thread, one frame at a time, and never touches
the shared state cell itself: it takes a snapshot and returns the next one.
"""

from __future__ import annotations

import time
from datetime import datetime, timezone
from typing import Callable, Optional

from loguru import logger

from painlab_nidaq.types import (
    ChannelConfig,
    ControlApplyError,
    StimulationControlFrame,
    StimulationOutputError,
    StimulatorDAQProtocol,
)

from .state import ProtocolState
from .waveform import clamp_pulse_length, generate_pulse_waveform


def utc_now_ms() -> int:
    return int(datetime.now(timezone.utc).timestamp() * 1000)


class ControlFrameApplicator:
    """Turns control frames into switch writes and pulse trains.

    Parameters
    ----------
    device : StimulatorDAQProtocol
        Hardware output primitives.
    channel_config : ChannelConfig
        Decides single vs dual channel behaviour.
    settle_delay_s : float, optional
        Pause after the hardware reports completion, before the shock is
        time-stamped. Defaults to ``channel_config.settle_delay_s``.
    clock : callable, optional
        Returns the current UTC time in epoch milliseconds.
    sleep : callable, optional
        Used for the settle delay.
    """

    def __init__(
        self,
        device: StimulatorDAQProtocol,
        channel_config: ChannelConfig,
        settle_delay_s: Optional[float] = None,
        clock: Callable[[], int] = utc_now_ms,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.device = device
        self.channel_config = channel_config
        self.settle_delay_s = (
            channel_config.settle_delay_s if settle_delay_s is None else settle_delay_s
        )
        self._clock = clock
        self._sleep = sleep

    def apply(
        self, frame: StimulationControlFrame, state: ProtocolState
    ) -> tuple[ProtocolState, Optional[int]]:
        """Apply ``frame`` on top of ``state``.

        Returns
        -------
        tuple[ProtocolState, int | None]
            The next state and the new shock timestamp (None when no
            stimulation was triggered).

        Raises
        ------
        ControlApplyError
            The frame asked for an impossible channel, or a hardware write
            failed. In the latter case ``err.state`` carries the next state
            (lengths and channel carried over, success flag reset).
        """
        logger.debug("Applying {} on {}", frame, state)
        length = clamp_pulse_length(
            state.pulse_length
            if frame.stimulation_length is None
            else frame.stimulation_length
        )

        switch_requested = frame.switch_channel is not None
        channel = state.selected_channel
        if switch_requested and self.channel_config.is_dual:
            if frame.switch_channel >= self.channel_config.n_stim_channels:
                raise ControlApplyError(
                    f"switch_channel {frame.switch_channel} out of range for "
                    + f"{self.channel_config.n_stim_channels} channels"
                )
            channel = frame.switch_channel

        output_success = True
        if switch_requested and self.device.has_digital_switch():
            output_success = self._write_switch(frame.switch_channel)
            if not output_success:
                # the hardware is still routed to the previous channel
                channel = state.selected_channel

        shock_ts = None
        # never pulse into a channel the switch may not have reached
        if frame.normalised_current_level is not None and output_success:
            try:
                shock_ts = self._stimulate(
                    frame.normalised_current_level, length, channel, state
                )
            except StimulationOutputError:
                logger.exception("Stimulation output failed.")
                output_success = False

        new_state = state.evolve(
            pulse_length=length,
            selected_channel=channel,
            last_timestamp=state.last_timestamp if shock_ts is None else shock_ts,
            output_success=output_success,
        )
        if not new_state.output_success:
            raise ControlApplyError(
                "failed to apply control", state=new_state.evolve(output_success=True)
            )
        return new_state, shock_ts

    def _write_switch(self, channel: int) -> bool:
        n_lines = self.device.n_switch_lines()
        if channel >= n_lines:
            raise ControlApplyError(
                f"switch_channel {channel} out of range for {n_lines} switch lines"
            )
        pattern = [line == channel for line in range(n_lines)]
        try:
            self.device.write_switch_lines(pattern)
        except StimulationOutputError:
            logger.exception("Switch write failed.")
            return False
        logger.info("Switched stimulation to channel {}", channel)
        return True

    def _stimulate(
        self, level: float, length: int, channel: int, state: ProtocolState
    ) -> int:
        target = channel if self.channel_config.is_dual else None
        waveform = generate_pulse_waveform(level, length, target)
        self.device.write_stimulation(waveform)
        self.device.wait_until_output_done(self.channel_config.output_timeout_s)
        if self.settle_delay_s > 0:
            self._sleep(self.settle_delay_s)
        shock_ts = max(self._clock(), state.last_timestamp)
        logger.info(
            "Stimulated: level {}, length {} ms, channel {}, at {}",
            level,
            length,
            target,
            shock_ts,
        )
        return shock_ts
