from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, Iterator, Optional, Tuple

MAX_DIST = 1000
UNKNOWN_HOP = "X"


class NodeID(str, Enum):
    A = "A"
    B = "B"
    C = "C"
    D = "D"
    E = "E"
    F = "F"
    G = "G"

    @classmethod
    def parse(cls, symbol: str) -> "NodeID":
        try:
            return cls(symbol.strip())
        except ValueError:
            raise ValueError(f"unknown node symbol {symbol!r}") from None

    def __str__(self) -> str:
        return self.value


# canonical iteration order of the universe
ALL_NODES: Tuple[NodeID, ...] = tuple(NodeID)


def others(node_id: NodeID) -> Tuple[NodeID, ...]:
    return tuple(n for n in ALL_NODES if n != node_id)


@dataclass(frozen=True)
class RoutingTableEntry:
    dest: NodeID
    distance: int
    next_hop: Optional[NodeID]

    def __post_init__(self):
        if self.distance == MAX_DIST:
            if self.next_hop is not None:
                raise ValueError(f"unreachable {self.dest} cannot have next hop {self.next_hop}")
        elif not 0 < self.distance < MAX_DIST:
            raise ValueError(f"distance {self.distance} to {self.dest} out of range")
        elif self.next_hop is None:
            raise ValueError(f"reachable {self.dest} needs a next hop")

    @property
    def reachable(self) -> bool:
        return self.distance < MAX_DIST

    @staticmethod
    def unreachable(dest: NodeID) -> "RoutingTableEntry":
        return RoutingTableEntry(dest, MAX_DIST, None)


@dataclass(frozen=True)
class NeighborLink:
    dest: NodeID
    cost: int
    address: Tuple[str, int]

    def __post_init__(self):
        if not 0 < self.cost < MAX_DIST:
            raise ValueError(f"link cost {self.cost} to {self.dest} out of range")


class RoutingTable:
    """Complete table: exactly one entry per node of the universe except self."""

    def __init__(self, node_id: NodeID, entries: Iterable[RoutingTableEntry] = ()):
        self.node_id = node_id
        self._rows: Dict[NodeID, RoutingTableEntry] = {d: RoutingTableEntry.unreachable(d) for d in others(node_id)}
        for entry in entries:
            self[entry.dest] = entry

    @classmethod
    def initial(cls, node_id: NodeID, links: Iterable[NeighborLink]) -> "RoutingTable":
        return cls(node_id, (RoutingTableEntry(l.dest, l.cost, l.dest) for l in links))

    def __getitem__(self, dest: NodeID) -> RoutingTableEntry:
        return self._rows[dest]

    def __setitem__(self, dest: NodeID, entry: RoutingTableEntry):
        if dest not in self._rows:
            raise KeyError(f"{dest} is not a destination of {self.node_id}")
        if entry.dest != dest:
            raise ValueError(f"entry for {entry.dest} stored under {dest}")
        self._rows[dest] = entry

    def __iter__(self) -> Iterator[NodeID]:
        return iter(self._rows)

    def __len__(self) -> int:
        return len(self._rows)

    def __eq__(self, other) -> bool:
        if not isinstance(other, RoutingTable):
            return NotImplemented
        return self.node_id == other.node_id and self.snapshot() == other.snapshot()

    def entries(self) -> Iterator[RoutingTableEntry]:
        return iter(self._rows.values())

    def snapshot(self) -> Tuple[RoutingTableEntry, ...]:
        return tuple(self._rows.values())

    def copy(self) -> "RoutingTable":
        return RoutingTable(self.node_id, self.snapshot())


@dataclass
class NodeState:
    node_id: NodeID
    listen_address: Tuple[str, int]
    neighbors: Dict[NodeID, NeighborLink] = field(default_factory=dict)
    table: Optional[RoutingTable] = None

    def __post_init__(self):
        if self.node_id in self.neighbors:
            raise ValueError(f"{self.node_id} cannot be its own neighbor")
        if self.table is None:
            self.table = RoutingTable.initial(self.node_id, self.neighbors.values())

    def link_cost(self, node_id: NodeID) -> Optional[int]:
        link = self.neighbors.get(node_id)
        return link.cost if link else None

    def links(self) -> Tuple[NeighborLink, ...]:
        # canonical order, so send rounds are deterministic
        return tuple(self.neighbors[n] for n in ALL_NODES if n in self.neighbors)
