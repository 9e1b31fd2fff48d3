from __future__ import annotations
from enum import Enum
from ..messages import DistanceVectorMessage
from ..state import MAX_DIST, NodeState, RoutingTable, RoutingTableEntry
from ..utils import make_logger


def relax(table: RoutingTable, vector: DistanceVectorMessage, link_cost: int) -> bool:
    """Bellman-Ford step: accept sender-reported distance + link cost where it improves on ours.

    A worse report from the current next hop is NOT accepted. Once a route via
    the sender is installed it only ever shrinks, so a real cost increase
    upstream is never learned (count-to-infinity is avoided, staleness is not).
    """
    if not 0 < link_cost < MAX_DIST:
        raise ValueError(f"link cost {link_cost} to {vector.sender} out of range")
    changed = False
    reported = vector.as_dict()
    for dest in table:
        if dest == vector.sender or dest not in reported:
            continue
        current = table[dest].distance
        candidate = min(reported[dest] + link_cost, MAX_DIST)
        if candidate < current or (current == MAX_DIST and candidate < MAX_DIST):
            table[dest] = RoutingTableEntry(dest, candidate, vector.sender)
            changed = True
    return changed


class Update(str, Enum):
    UPDATED = "updated"
    UNCHANGED = "unchanged"
    REJECTED = "rejected"


class DistanceVector:
    def __init__(self, state: NodeState, log_level: str = "INFO"):
        self.state = state
        self.log = make_logger(f"DVR({state.node_id})", log_level)

    def on_info(self, vector: DistanceVectorMessage) -> Update:
        cost = self.state.link_cost(vector.sender)
        if cost is None:
            self.log.warning(f"rejecting vector from {vector.sender}: not a direct neighbor")
            return Update.REJECTED
        return Update.UPDATED if relax(self.state.table, vector, cost) else Update.UNCHANGED
