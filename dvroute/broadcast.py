from __future__ import annotations
import asyncio
from enum import Enum
from typing import Dict, Sequence
from .core.protocol import encode
from .core.utils import MAX_TRIES, TIMEOUT_SECS
from .messages import DistanceVectorMessage
from .state import NeighborLink, NodeID
from .transport import TransportError
from .utils import make_logger


class Outcome(str, Enum):
    ACKED = "acked"
    SENT = "sent"
    ABANDONED = "abandoned"
    FAILED = "failed"


class ReliableMulticastSender:
    """Sends one vector to every neighbor with a bounded resend budget.

    `tries` is shared by every neighbor and every round for the lifetime of
    the sender and is never reset: once `max_tries` resends have been spent,
    a neighbor that does not reply within `timeout` is dropped for the round
    immediately. Peers never reply to vectors, so with `await_reply` on each
    neighbor costs at most `timeout * (max_tries + 1)`.
    """

    def __init__(self, transport, timeout: float = TIMEOUT_SECS, max_tries: int = MAX_TRIES, await_reply: bool = True, concurrent: bool = False, name: str = "", log_level="INFO"):
        if timeout <= 0: raise ValueError("timeout must be positive")
        if max_tries < 0: raise ValueError("max_tries cannot be negative")
        self.transport = transport
        self.timeout = timeout
        self.max_tries = max_tries
        self.await_reply = await_reply
        self.concurrent = concurrent
        self.tries = 0
        self.log = make_logger(f"Sender({name})" if name else "Sender", log_level)

    @property
    def tries_left(self) -> int:
        return max(0, self.max_tries - self.tries)

    def _spend_try(self) -> bool:
        if self.tries >= self.max_tries:
            return False
        self.tries += 1
        return True

    async def broadcast(self, vector: DistanceVectorMessage, neighbors: Sequence[NeighborLink]) -> Dict[NodeID, Outcome]:
        payload = encode(vector)
        if self.concurrent:
            results = await asyncio.gather(*(self._deliver(link, payload) for link in neighbors))
            return {link.dest: res for link, res in zip(neighbors, results)}
        outcomes: Dict[NodeID, Outcome] = {}
        for link in neighbors:
            outcomes[link.dest] = await self._deliver(link, payload)
        return outcomes

    async def _deliver(self, link: NeighborLink, payload: bytes) -> Outcome:
        self.log.debug(f"sending distance vector to neighbor {link.dest}")
        while True:
            try:
                await self.transport.send(link, payload)
            except TransportError as e:
                self.log.warning(f"{e}")
                if not self._spend_try():
                    return Outcome.FAILED
                continue
            if not self.await_reply:
                return Outcome.SENT
            if await self.transport.wait_reply(self.timeout) is not None:
                return Outcome.ACKED
            if not self._spend_try():
                self.log.info(f"no reply from {link.dest}, skipping it this round")
                return Outcome.ABANDONED
            self.log.info(f"while sending to {link.dest}, timed out, {self.tries_left} more tries...")
