from .state import MAX_DIST, NodeID, NodeState, RoutingTable, RoutingTableEntry, NeighborLink
from .messages import DistanceVectorMessage, build_vector
from .node import Node, StepResult

__all__ = ["MAX_DIST", "NodeID", "NodeState", "RoutingTable", "RoutingTableEntry", "NeighborLink", "DistanceVectorMessage", "build_vector", "Node", "StepResult"]
