from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Optional, Tuple
from .state import MAX_DIST, NodeID, NodeState, RoutingTable, others

@dataclass(frozen=True)
class DistanceVectorMessage:
    sender: NodeID
    entries: Tuple[Tuple[NodeID, int], ...]
    neighbor_count: int = 0

    def as_dict(self) -> Dict[NodeID, int]:
        return dict(self.entries)

    def distance_to(self, dest: NodeID) -> Optional[int]:
        for d, dist in self.entries:
            if d == dest: return dist
        return None

    def reachable(self) -> Tuple[NodeID, ...]:
        return tuple(d for d, dist in self.entries if dist < MAX_DIST)

def vector_from_table(table: RoutingTable, sender: NodeID, neighbor_count: int = 0) -> DistanceVectorMessage:
    # unreachable destinations are sent explicitly as MAX_DIST, never omitted
    return DistanceVectorMessage(sender=sender, entries=tuple((d, table[d].distance) for d in others(sender)), neighbor_count=neighbor_count)

def build_vector(state: NodeState) -> DistanceVectorMessage:
    return vector_from_table(state.table, state.node_id, neighbor_count=len(state.neighbors))
