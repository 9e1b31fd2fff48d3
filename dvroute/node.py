from __future__ import annotations
import asyncio
from enum import Enum
from typing import Dict, Optional, Tuple
from .algorithms.dvr import DistanceVector, Update
from .broadcast import Outcome, ReliableMulticastSender
from .core.protocol import DecodeError, decode
from .core.utils import MAX_TRIES, PERIOD_SECS, TIMEOUT_SECS
from .messages import DistanceVectorMessage, build_vector
from .state import NodeID, NodeState, RoutingTableEntry
from .utils import make_logger, pretty_neighbors, pretty_outcomes, pretty_table, pretty_vector


class Phase(str, Enum):
    WAITING = "waiting"
    APPLYING = "applying"
    BROADCASTING = "broadcasting"


class StepResult(str, Enum):
    PERIODIC = "periodic"     # deadline elapsed, keepalive sent
    UPDATED = "updated"       # table changed, triggered update sent
    UNCHANGED = "unchanged"
    DISCARDED = "discarded"   # undecodable datagram
    REJECTED = "rejected"     # sender is not a direct neighbor


class Node:
    def __init__(self, state: NodeState, transport, period: float = PERIOD_SECS, timeout: float = TIMEOUT_SECS, max_tries: int = MAX_TRIES, await_reply: bool = True, concurrent: bool = False, show=print, log_level="INFO"):
        if period <= 0: raise ValueError("period must be positive")
        self.state = state
        self.transport = transport
        self.period = period
        self.algo = DistanceVector(state, log_level=log_level)
        self.sender = ReliableMulticastSender(transport, timeout=timeout, max_tries=max_tries, await_reply=await_reply, concurrent=concurrent, name=str(state.node_id), log_level=log_level)
        self.show = show or (lambda _s: None)
        self.log = make_logger(f"Node({state.node_id})", log_level)

        self.phase = Phase.WAITING
        self.outgoing: DistanceVectorMessage = build_vector(state)
        self.last_sent: Optional[DistanceVectorMessage] = None
        self.last_received: Optional[DistanceVectorMessage] = None
        self.last_outcomes: Dict[NodeID, Outcome] = {}
        self.rounds = 0

    @property
    def node_id(self) -> NodeID:
        return self.state.node_id

    def table_snapshot(self) -> Tuple[RoutingTableEntry, ...]:
        return self.state.table.snapshot()

    # -------- lifecycle --------
    async def start(self):
        await self.transport.start()
        self.show(f"[{self.node_id}] Neighbor table:\n{pretty_neighbors(self.state.links())}")
        self.show(f"[{self.node_id}] Initial routing table:\n{pretty_table(self.table_snapshot())}")
        await self._broadcast("initial")
        self.phase = Phase.WAITING

    async def stop(self):
        await self.transport.stop()

    async def run(self):
        await self.start()
        try:
            while True:
                await self.step()
        finally:
            await self.stop()

    # -------- state machine --------
    async def step(self) -> StepResult:
        self.phase = Phase.WAITING
        try:
            raw, addr = await asyncio.wait_for(self.transport.recv(), timeout=self.period)
        except asyncio.TimeoutError:
            if not self.transport.pending():
                await self._broadcast("periodic")
                self.phase = Phase.WAITING
                return StepResult.PERIODIC
            # deadline and arrival raced: the message wins
            raw, addr = await self.transport.recv()
        result = await self._on_datagram(raw, addr)
        self.phase = Phase.WAITING
        return result

    async def _on_datagram(self, raw: bytes, addr) -> StepResult:
        try:
            vector = decode(raw)
        except DecodeError as e:
            self.log.warning(f"dropping datagram from {addr}: {e}")
            return StepResult.DISCARDED
        self.last_received = vector
        self.show(f"[{self.node_id}] Received distance vector from {vector.sender}:\n{pretty_vector(vector)}")

        self.phase = Phase.APPLYING
        update = self.algo.on_info(vector)
        if update is Update.REJECTED:
            return StepResult.REJECTED
        if update is Update.UNCHANGED:
            return StepResult.UNCHANGED

        self.outgoing = build_vector(self.state)
        self.show(f"[{self.node_id}] Updated routing table:\n{pretty_table(self.table_snapshot())}")
        await self._broadcast("triggered")
        return StepResult.UPDATED

    async def _broadcast(self, reason: str):
        self.phase = Phase.BROADCASTING
        vector = self.outgoing
        self.rounds += 1
        self.last_outcomes = await self.sender.broadcast(vector, self.state.links())
        self.last_sent = vector
        self.log.info(f"{reason} send #{self.rounds}: {pretty_outcomes(self.last_outcomes)}")
