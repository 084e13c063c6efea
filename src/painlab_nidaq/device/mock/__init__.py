from .mock_daq import MockDAQ

__all__ = ["MockDAQ"]
