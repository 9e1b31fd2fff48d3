from __future__ import annotations
import asyncio
from typing import Optional, Tuple
import redis.asyncio as redis
from redis.exceptions import RedisError
from . import TransportError
from ..core.utils import CHANNEL_PREFIX, REDIS_HOST, REDIS_PASSWORD, REDIS_PORT
from ..state import NeighborLink, NodeID
from ..utils import make_logger


class RedisTransport:
    """Pub/sub stand-in for UDP: one channel per node id, plus a per-node reply channel."""

    def __init__(self, node_id: NodeID, host: str = REDIS_HOST, port: int = REDIS_PORT, password: Optional[str] = REDIS_PASSWORD, prefix: str = CHANNEL_PREFIX, client=None, log_level="INFO"):
        self.node_id = node_id; self.prefix = prefix
        self.r = client if client is not None else redis.Redis(host=host, port=port, password=password)
        self.log = make_logger(f"Redis({node_id})", log_level)
        self.inbound: asyncio.Queue = asyncio.Queue()
        self.replies: asyncio.Queue = asyncio.Queue()
        self.pubsub = None
        self._reader: Optional[asyncio.Task] = None

    def channel_for(self, node_id: NodeID) -> str:
        return f"{self.prefix}.{node_id}"

    def reply_channel_for(self, node_id: NodeID) -> str:
        return f"{self.channel_for(node_id)}.reply"

    async def start(self):
        try:
            self.pubsub = self.r.pubsub()
            await self.pubsub.subscribe(self.channel_for(self.node_id), self.reply_channel_for(self.node_id))
        except RedisError as e:
            raise TransportError(f"cannot subscribe on redis: {e}") from e
        self._reader = asyncio.create_task(self._read_loop())
        self.log.info(f"Subscribed to {self.channel_for(self.node_id)}")

    async def stop(self):
        if self._reader is not None:
            self._reader.cancel()
            try: await self._reader
            except asyncio.CancelledError: pass
            self._reader = None
        if self.pubsub is not None:
            await self.pubsub.aclose(); self.pubsub = None
        await self.r.aclose()

    async def _read_loop(self):
        reply_channel = self.reply_channel_for(self.node_id).encode()
        while True:
            try:
                raw = await self.pubsub.get_message(ignore_subscribe_messages=True, timeout=1.0)
            except RedisError as e:
                self.log.error(f"pubsub read failed: {e}")
                await asyncio.sleep(1.0)
                continue
            if not raw:
                continue
            try:
                channel = raw["channel"]
                if isinstance(channel, str): channel = channel.encode()
                target = self.replies if channel == reply_channel else self.inbound
                target.put_nowait((raw["data"], (channel.decode(), 0)))
            except Exception as e:
                # one bad message must not end the reader
                self.log.error(f"dropping pubsub message {raw!r}: {e!r}")

    def pending(self) -> bool:
        return not self.inbound.empty()

    async def recv(self) -> Tuple[bytes, Tuple[str, int]]:
        return await self.inbound.get()

    async def send(self, link: NeighborLink, payload: bytes):
        try:
            await self.r.publish(self.channel_for(link.dest), payload)
        except RedisError as e:
            raise TransportError(f"publish to {link.dest} failed: {e}") from e

    async def wait_reply(self, timeout: float) -> Optional[bytes]:
        try:
            data, _ = await asyncio.wait_for(self.replies.get(), timeout)
        except asyncio.TimeoutError:
            return None
        return data
