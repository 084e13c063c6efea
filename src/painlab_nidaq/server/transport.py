# -*- coding: utf-8 -*-
"""
ZeroMQ link between the device process and the PainLab hub.

The device connects a DEALER socket to the hub's ROUTER. Every message is a
two-part multipart message ``[kind, payload]``:

==============  =========  =============================================
kind            direction  payload
==============  =========  =============================================
``descriptor``  device->   device descriptor JSON, once at registration
``data``        device->   one StimulationDataFrame (UTF-8 JSON)
``error``       device->   failure message, e.g. "failed to apply control"
``control``     ->device   one StimulationControlFrame (UTF-8 JSON)
==============  =========  =============================================

ZeroMQ sockets are not thread-safe, so the socket lives on a dedicated I/O
thread running its own asyncio loop. ``send_bytes``/``push_frame``/
``report_error`` may be called from any thread: they queue onto that loop.
Inbound control messages are handed to the registered handler from the I/O
thread, which only queues them for the control loop.
"""

from __future__ import annotations

import asyncio
import threading
import types
from contextlib import suppress
from typing import Optional

import zmq
import zmq.asyncio
from loguru import logger

from painlab_nidaq.types import CommsError, ControlHandler, NetworkConfig
from painlab_nidaq.util import DEFAULT_TIMEOUT

MSG_KIND = types.SimpleNamespace()
MSG_KIND.DESCRIPTOR = b"descriptor"
MSG_KIND.DATA = b"data"
MSG_KIND.ERROR = b"error"
MSG_KIND.CONTROL = b"control"

_SHUTDOWN = None  # outbox sentinel


class ZmqTransport:
    """Implements :class:`painlab_nidaq.types.TransportProtocol` over ZeroMQ."""

    def __init__(self, network_config: NetworkConfig):
        self.network_config = network_config
        self._handler: Optional[ControlHandler] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._outbox: Optional[asyncio.Queue] = None
        self._thread: Optional[threading.Thread] = None
        self._ready = threading.Event()
        self._startup_error: Optional[BaseException] = None
        self.sent = 0
        self.received = 0

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self, timeout: float = DEFAULT_TIMEOUT):
        if self._thread is not None:
            raise CommsError("Transport already started")
        self._thread = threading.Thread(
            target=self._run, name="painlab-transport", daemon=True
        )
        self._thread.start()
        if not self._ready.wait(timeout):
            raise CommsError(
                f"Transport to {self.network_config.endpoint} did not start"
            )
        if self._startup_error is not None:
            raise CommsError(
                f"Could not connect to {self.network_config.endpoint}"
            ) from self._startup_error

    def close(self, timeout: float = DEFAULT_TIMEOUT):
        """Flush queued messages and stop the I/O thread."""
        if self._thread is None:
            return
        with suppress(CommsError):
            self._enqueue(_SHUTDOWN)
        self._thread.join(timeout)
        if self._thread.is_alive():
            logger.warning("Transport thread did not exit within {} s", timeout)
        self._thread = None
        logger.info("Transport closed ({} sent, {} received)", self.sent, self.received)

    def is_open(self) -> bool:
        return self._thread is not None and self._loop is not None

    # ------------------------------------------------------------------
    # TransportProtocol
    # ------------------------------------------------------------------

    def set_control_handler(self, handler: ControlHandler) -> None:
        self._handler = handler

    def send_bytes(self, blob: bytes) -> None:
        self._enqueue((MSG_KIND.DESCRIPTOR, bytes(blob)))

    def push_frame(self, blob: bytes) -> None:
        self._enqueue((MSG_KIND.DATA, bytes(blob)))

    def report_error(self, message: str) -> None:
        logger.warning("*ERROR* (device->): {}", message)
        self._enqueue((MSG_KIND.ERROR, message.encode("utf-8")))

    # ------------------------------------------------------------------
    # I/O thread
    # ------------------------------------------------------------------

    def _enqueue(self, item):
        if self._loop is None or self._outbox is None:
            raise CommsError("Transport is not started")
        try:
            self._loop.call_soon_threadsafe(self._outbox.put_nowait, item)
        except RuntimeError as e:  # loop already closed
            raise CommsError("Transport is closed") from e

    def _run(self):
        try:
            asyncio.run(self._serve())
        except Exception as e:
            logger.exception("Transport I/O thread crashed.")
            self._startup_error = e
            self._ready.set()
        finally:
            self._loop = None

    async def _serve(self):
        context = zmq.asyncio.Context()
        socket = context.socket(zmq.DEALER)
        socket.setsockopt(zmq.LINGER, 0)
        try:
            socket.connect(self.network_config.endpoint)
        except zmq.ZMQError:
            socket.close()
            context.term()
            raise
        logger.info("Transport connected to {}", self.network_config.endpoint)

        self._outbox = asyncio.Queue()
        self._loop = asyncio.get_running_loop()
        receiver = asyncio.create_task(self._recv_loop(socket))
        self._ready.set()
        try:
            await self._send_loop(socket)
        finally:
            receiver.cancel()
            with suppress(asyncio.CancelledError):
                await receiver
            socket.close()
            context.term()

    async def _send_loop(self, socket: zmq.asyncio.Socket):
        while True:
            item = await self._outbox.get()
            if item is _SHUTDOWN:
                return
            kind, payload = item
            try:
                await socket.send_multipart([kind, payload])
                self.sent += 1
            except zmq.ZMQError:
                logger.exception("Error sending {} message.", kind.decode())

    async def _recv_loop(self, socket: zmq.asyncio.Socket):
        while True:
            parts = await socket.recv_multipart()
            self.received += 1
            if len(parts) != 2:
                logger.error("Malformed message from hub ({} parts)", len(parts))
                continue
            kind, payload = parts
            if kind != MSG_KIND.CONTROL:
                logger.warning("Ignoring unknown message kind {!r}", kind)
                continue
            if self._handler is None:
                logger.warning("Control message received before a handler was set")
                continue
            try:
                self._handler(payload, len(payload))
            except Exception:
                logger.exception("Control handler raised.")
