"""Exception hierarchy for painlab_nidaq."""


class PainlabError(Exception):
    """Base exception for all painlab_nidaq errors."""

    pass


class ConfigError(PainlabError):
    """Raised when a configuration file is missing or invalid."""

    pass


class ControlApplyError(PainlabError):
    """Raised when a control frame could not be applied.

    Recoverable: the control loop reports it and keeps running. ``state`` is the
    protocol state to publish despite the failure (or None to keep the old one).
    """

    def __init__(self, message="failed to apply control", state=None):
        super().__init__(message)
        self.state = state


class FrameDecodeError(ControlApplyError):
    """Raised when inbound control bytes cannot be decoded into a frame."""

    pass


class AcquisitionFault(PainlabError):
    """Raised by a DAQ device when a read fails. Fatal for the acquisition loop."""

    pass


class StimulationOutputError(PainlabError):
    """Raised by a DAQ device when an analog or digital write fails."""

    pass


class CommsError(PainlabError):
    """Raised when the link to the hub is unusable."""

    pass
