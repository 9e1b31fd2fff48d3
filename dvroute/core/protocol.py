import struct
from typing import Set
from ..messages import DistanceVectorMessage
from ..state import ALL_NODES, MAX_DIST, NodeID

# v1 layout, network byte order, no padding:
#   magic "DV" | version u8 | sender char | neighbor count u8 | entry count u8
#   then entry count x (dest char | distance u32)
MAGIC = b"DV"
VERSION = 1
MAX_ENTRIES = len(ALL_NODES) - 1
HEADER = struct.Struct("!2sBcBB")
ENTRY = struct.Struct("!cI")
MAX_DATAGRAM = HEADER.size + MAX_ENTRIES * ENTRY.size


class DecodeError(ValueError):
    pass


def _symbol(raw: bytes, what: str) -> NodeID:
    try:
        return NodeID(raw.decode("ascii"))
    except (UnicodeDecodeError, ValueError):
        raise DecodeError(f"illegal {what} {raw!r}") from None


def encode(msg: DistanceVectorMessage) -> bytes:
    if len(msg.entries) > MAX_ENTRIES:
        raise ValueError(f"vector carries {len(msg.entries)} entries, at most {MAX_ENTRIES} fit")
    out = [HEADER.pack(MAGIC, VERSION, msg.sender.value.encode("ascii"), msg.neighbor_count, len(msg.entries))]
    for dest, dist in msg.entries:
        out.append(ENTRY.pack(dest.value.encode("ascii"), dist))
    return b"".join(out)


def decode(raw: bytes) -> DistanceVectorMessage:
    if isinstance(raw, str):
        raise DecodeError("expected bytes")
    raw = bytes(raw)
    if len(raw) < HEADER.size:
        raise DecodeError(f"datagram of {len(raw)} bytes is shorter than the header")
    magic, version, sender, neighbor_count, count = HEADER.unpack_from(raw)
    if magic != MAGIC:
        raise DecodeError(f"bad magic {magic!r}")
    if version != VERSION:
        raise DecodeError(f"unsupported version {version}")
    sender = _symbol(sender, "sender")
    if count > MAX_ENTRIES:
        raise DecodeError(f"entry count {count} exceeds {MAX_ENTRIES}")
    if neighbor_count > MAX_ENTRIES:
        raise DecodeError(f"neighbor count {neighbor_count} exceeds {MAX_ENTRIES}")
    if len(raw) != HEADER.size + count * ENTRY.size:
        raise DecodeError(f"datagram of {len(raw)} bytes does not hold {count} entries")

    entries = []
    seen: Set[NodeID] = set()
    for offset in range(HEADER.size, len(raw), ENTRY.size):
        dest, dist = ENTRY.unpack_from(raw, offset)
        dest = _symbol(dest, "destination")
        if dest == sender:
            raise DecodeError(f"{sender} reports a distance to itself")
        if dest in seen:
            raise DecodeError(f"duplicate destination {dest}")
        if dist > MAX_DIST:
            raise DecodeError(f"distance {dist} to {dest} above {MAX_DIST}")
        seen.add(dest)
        entries.append((dest, dist))
    return DistanceVectorMessage(sender=sender, entries=tuple(entries), neighbor_count=neighbor_count)
