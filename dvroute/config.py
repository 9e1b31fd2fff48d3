from __future__ import annotations
from typing import Dict, List, Tuple
from .state import MAX_DIST, NeighborLink, NodeID, NodeState

class ConfigError(Exception): ...
class ConfigNotFound(ConfigError): ...
class ConfigMalformed(ConfigError): ...

def _int(value: str, what: str) -> int:
    try: return int(value)
    except ValueError: raise ConfigMalformed(f"{what} {value!r} is not an integer") from None

def _port(value: str, what: str) -> int:
    port = _int(value, what)
    if not 0 < port < 65536: raise ConfigMalformed(f"{what} {port} out of range")
    return port

def _node(value: str, what: str) -> NodeID:
    try: return NodeID.parse(value)
    except ValueError as e: raise ConfigMalformed(f"{what}: {e}") from None

class NodeConfig:
    """Line-oriented node file: own symbol, listen port, then (symbol, distance, ip, port) per node."""

    def __init__(self, node_id: NodeID, port: int, links: List[NeighborLink], unlinked: List[NodeID]):
        self.node_id=node_id; self.port=port; self.links=links; self.unlinked=unlinked

    @staticmethod
    def parse(text: str) -> "NodeConfig":
        records = [line.strip() for line in text.splitlines() if line.strip()]
        if len(records) < 2:
            raise ConfigMalformed(f"expected node symbol and listen port, got {len(records)} record(s)")
        node_id = _node(records[0], "node symbol"); port = _port(records[1], "listen port")
        body = records[2:]
        if len(body) % 4:
            raise ConfigMalformed(f"trailing incomplete node group ({len(body) % 4} of 4 records)")
        seen: Dict[NodeID, int] = {}
        links: List[NeighborLink] = []; unlinked: List[NodeID] = []
        for i in range(0, len(body), 4):
            sym, dist, ip, peer_port = body[i:i+4]; group = i // 4 + 1
            dest = _node(sym, f"group {group} symbol")
            if dest in seen: raise ConfigMalformed(f"node {dest} listed twice (groups {seen[dest]} and {group})")
            seen[dest] = group
            dist = _int(dist, f"group {group} distance"); peer_port = _port(peer_port, f"group {group} port")
            if dest == node_id: continue
            # 0, negative and >= MAX_DIST all mean "no direct link"
            if 0 < dist < MAX_DIST: links.append(NeighborLink(dest, dist, (ip, peer_port)))
            else: unlinked.append(dest)
        return NodeConfig(node_id, port, links, unlinked)

    @staticmethod
    def load(path: str) -> "NodeConfig":
        try:
            with open(path, "r", encoding="utf-8") as fp: text = fp.read()
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigNotFound(f"can't open configuration file {path}: {e}") from e
        return NodeConfig.parse(text)

    def listen_address(self, host: str) -> Tuple[str, int]:
        return (host, self.port)

    def to_state(self, host: str = "0.0.0.0") -> NodeState:
        return NodeState(node_id=self.node_id, listen_address=self.listen_address(host), neighbors={l.dest: l for l in self.links})
