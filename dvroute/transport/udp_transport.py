from __future__ import annotations
import asyncio
from typing import Optional, Tuple
from . import TransportError
from ..core.protocol import MAX_DATAGRAM
from ..state import NeighborLink
from ..utils import make_logger

Datagram = Tuple[bytes, Tuple[str, int]]


class _Inbox(asyncio.DatagramProtocol):
    def __init__(self, queue: asyncio.Queue, log):
        self.queue = queue; self.log = log

    def datagram_received(self, data: bytes, addr: Tuple[str, int]) -> None:
        if len(data) > MAX_DATAGRAM:
            # still queued; the codec rejects it and the loop logs the drop
            self.log.debug(f"oversized datagram ({len(data)} bytes) from {addr}")
        self.queue.put_nowait((data, addr))

    def error_received(self, exc: Exception) -> None:
        self.log.warning(f"socket error: {exc}")


class UDPTransport:
    """Listen endpoint for vectors, plus a separate send endpoint whose inbound traffic counts as replies."""

    def __init__(self, listen_address: Tuple[str, int], log_level="INFO"):
        self.listen_address = listen_address
        self.log = make_logger(f"UDP({listen_address[0]}:{listen_address[1]})", log_level)
        self.inbound: asyncio.Queue = asyncio.Queue()
        self.replies: asyncio.Queue = asyncio.Queue()
        self._rx: Optional[asyncio.DatagramTransport] = None
        self._tx: Optional[asyncio.DatagramTransport] = None

    async def start(self):
        loop = asyncio.get_running_loop()
        try:
            self._rx, _ = await loop.create_datagram_endpoint(lambda: _Inbox(self.inbound, self.log), local_addr=self.listen_address)
            self._tx, _ = await loop.create_datagram_endpoint(lambda: _Inbox(self.replies, self.log), local_addr=(self.listen_address[0], 0))
        except OSError as e:
            await self.stop()
            raise TransportError(f"cannot bind {self.listen_address[0]}:{self.listen_address[1]}: {e}") from e
        self.log.info(f"Listening on {self.listen_address[0]}:{self.listen_address[1]}")

    async def stop(self):
        for t in (self._rx, self._tx):
            if t is not None: t.close()
        self._rx = self._tx = None

    @property
    def bound_address(self) -> Optional[Tuple[str, int]]:
        return self._rx.get_extra_info("sockname")[:2] if self._rx is not None else None

    def pending(self) -> bool:
        return not self.inbound.empty()

    async def recv(self) -> Datagram:
        return await self.inbound.get()

    async def send(self, link: NeighborLink, payload: bytes):
        if self._tx is None:
            raise TransportError("transport not started")
        try:
            self._tx.sendto(payload, link.address)
        except OSError as e:
            raise TransportError(f"send to {link.dest} at {link.address[0]}:{link.address[1]} failed: {e}") from e

    async def wait_reply(self, timeout: float) -> Optional[bytes]:
        try:
            data, _ = await asyncio.wait_for(self.replies.get(), timeout)
        except asyncio.TimeoutError:
            return None
        return data
