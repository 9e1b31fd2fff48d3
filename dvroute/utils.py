import logging
from typing import Iterable, Mapping
from .state import UNKNOWN_HOP, NeighborLink, RoutingTableEntry

def make_logger(name: str, level: str = "INFO") -> logging.Logger:
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("[%(asctime)s] %(levelname)s %(name)s: %(message)s","%H:%M:%S"))
        logger.addHandler(handler)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    return logger

def pretty_table(entries: Iterable[RoutingTableEntry]) -> str:
    lines = ["dest\tdist\tnext_hop"]
    for e in entries:
        lines.append(f"{e.dest}\t{e.distance}\t{e.next_hop or UNKNOWN_HOP}")
    return "\n".join(lines)

def pretty_neighbors(links: Iterable[NeighborLink]) -> str:
    lines = ["neighbor\tdist\tip\tport"]
    for l in links:
        lines.append(f"{l.dest}\t\t{l.cost}\t{l.address[0]}\t{l.address[1]}")
    return "\n".join(lines)

def pretty_vector(vector) -> str:
    lines = [f"sender: {vector.sender}", f"neighbors: {vector.neighbor_count}", "dest\tdist"]
    reachable = vector.reachable()
    for d, dist in vector.entries:
        lines.append(f"{d}\t{dist}" + ("" if d in reachable else "\t(unreachable)"))
    return "\n".join(lines)

def pretty_outcomes(outcomes: Mapping) -> str:
    return ", ".join(f"{n}={o.value}" for n, o in outcomes.items()) or "no neighbors"
