# -*- coding: utf-8 -*-
"""
Hub transport and device process bootstrap.

See Also
--------
painlab_nidaq.server.transport : ZeroMQ link to the PainLab hub
painlab_nidaq.server.server : run_device entry point
"""

from .server import build_device, run_device
from .transport import MSG_KIND, ZmqTransport

__all__ = ["MSG_KIND", "ZmqTransport", "build_device", "run_device"]
