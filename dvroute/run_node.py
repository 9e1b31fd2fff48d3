from __future__ import annotations
import argparse, asyncio, sys
from .config import ConfigMalformed, ConfigNotFound, NodeConfig
from .core.utils import LISTEN_HOST, LOG_LEVEL, MAX_TRIES, PERIOD_SECS, TIMEOUT_SECS
from .node import Node
from .transport import TransportError
from .utils import make_logger

EXIT_CONFIG_UNREADABLE = 1
EXIT_CONFIG_MALFORMED = 2
EXIT_TRANSPORT = 3

def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="dvroute", description="Distance vector routing node")
    p.add_argument("config", help="Path to the node configuration file")
    p.add_argument("--transport", default="udp", choices=["udp","redis"])
    p.add_argument("--host", default=LISTEN_HOST, help="Address to bind the UDP listener on")
    p.add_argument("--timeout", type=float, default=TIMEOUT_SECS, help="Seconds to wait for a reply per send")
    p.add_argument("--max-tries", type=int, default=MAX_TRIES, help="Resends allowed over the whole run")
    p.add_argument("--period", type=float, default=PERIOD_SECS, help="Seconds without input before a periodic send")
    p.add_argument("--no-reply-wait", action="store_true", help="Do not wait for replies after sending")
    p.add_argument("--concurrent", action="store_true", help="Send to all neighbors at once")
    p.add_argument("--log", default=LOG_LEVEL)
    return p

def make_transport(args, state):
    if args.transport == "redis":
        from .transport.redis_transport import RedisTransport
        return RedisTransport(state.node_id, log_level=args.log)
    from .transport.udp_transport import UDPTransport
    return UDPTransport(state.listen_address, log_level=args.log)

def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    log = make_logger("dvroute", args.log)
    try:
        cfg = NodeConfig.load(args.config)
    except ConfigNotFound as e:
        log.error(str(e)); return EXIT_CONFIG_UNREADABLE
    except ConfigMalformed as e:
        log.error(f"error while reading {args.config}: {e}"); return EXIT_CONFIG_MALFORMED

    state = cfg.to_state(args.host)
    node = Node(
        state, make_transport(args, state),
        period=args.period, timeout=args.timeout, max_tries=args.max_tries,
        await_reply=not args.no_reply_wait, concurrent=args.concurrent, log_level=args.log,
    )
    try:
        asyncio.run(node.run())
    except TransportError as e:
        log.error(str(e)); return EXIT_TRANSPORT
    except KeyboardInterrupt:
        log.info("stopped")
    return 0

if __name__ == "__main__": sys.exit(main())
