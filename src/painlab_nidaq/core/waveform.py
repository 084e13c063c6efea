"""Pulse-train synthesis for the stimulation output.

The output is always a 500-sample buffer per stimulation channel (500 ms at the
default 1 kHz output rate). A pulse is a single sample every 5 ms; pulses stop
after the requested pulse length.
"""

from __future__ import annotations

from typing import Optional

import numpy as np

MAX_PULSE_LENGTH_MS = 500
MIN_PULSE_LENGTH_MS = 1
PULSE_BUFFER_SAMPLES = 500
PULSE_PERIOD_SAMPLES = 5
N_DUAL_CHANNELS = 2

# one 25 ms block of the pulse train: a pulse every PULSE_PERIOD_SAMPLES
PULSE_TEMPLATE = np.zeros(25)
PULSE_TEMPLATE[::PULSE_PERIOD_SAMPLES] = 1.0


def clamp_pulse_length(pulse_length_ms: int) -> int:
    """Clamp a requested pulse length into [1, 500] ms."""
    return int(min(max(pulse_length_ms, MIN_PULSE_LENGTH_MS), MAX_PULSE_LENGTH_MS))


def generate_pulse_waveform(
    factor: float, pulse_length_ms: int, target_channel: Optional[int] = None
) -> np.ndarray:
    """Build the stimulation waveform.

    Parameters
    ----------
    factor : float
        Pulse amplitude (normalised current level).
    pulse_length_ms : int
        Length of the pulse train. Capped at 500; values above are not rejected.
    target_channel : int, optional
        Row to stimulate in dual-channel mode. None selects single-channel mode.

    Returns
    -------
    np.ndarray
        Shape (500,) in single-channel mode, (2, 500) in dual-channel mode.
    """
    n_pulse = int(min(max(pulse_length_ms, 0), MAX_PULSE_LENGTH_MS))

    if target_channel is None:
        waveform = factor * np.resize(PULSE_TEMPLATE, PULSE_BUFFER_SAMPLES)
        waveform[n_pulse:] = 0.0
        return waveform

    if not 0 <= target_channel < N_DUAL_CHANNELS:
        raise ValueError(
            f"target_channel must be in [0, {N_DUAL_CHANNELS - 1}], got {target_channel}"
        )
    waveform = np.zeros((N_DUAL_CHANNELS, PULSE_BUFFER_SAMPLES))
    waveform[target_channel, :n_pulse:PULSE_PERIOD_SAMPLES] = factor
    return waveform
