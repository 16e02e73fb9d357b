import argparse
import asyncio
import logging
from decimal import Decimal

from notation.models import TableConfig
from .server import NotationServer

logging.basicConfig(level=logging.INFO)


def main() -> None:
    parser = argparse.ArgumentParser(description="Poker hand notation host")
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=8765)
    parser.add_argument("--sb", type=Decimal, default=Decimal("0.5"), help="Small blind in bb")
    parser.add_argument("--bb", type=Decimal, default=Decimal("1"), help="Big blind in bb")
    args = parser.parse_args()

    server = NotationServer(TableConfig(sb=args.sb, bb=args.bb))
    asyncio.run(server.start(host=args.host, port=args.port))


if __name__ == "__main__":
    main()
