"""
Seed or inspect the relationships table.

Blocks have no API endpoint; this is how they get into the database.

    python scripts/seed_relationships.py block andy@example.com john@example.com
    python scripts/seed_relationships.py friend andy@example.com lisa@example.com
    python scripts/seed_relationships.py stats
    python scripts/seed_relationships.py reset
"""

import argparse
import asyncio
import os
import sys

from sqlalchemy import func, select

# Add project root to sys.path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from friendgraph.core.config import settings
from friendgraph.core.errors import AppError
from friendgraph.core.validation import is_valid_identifier
from friendgraph.infra.db import close_db_connection, get_session_factory
from friendgraph.models import Relationship
from friendgraph.relationships.engine import RelationshipEngine
from friendgraph.relationships.store import RelationshipStore


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Seed the relationships table")
    sub = parser.add_subparsers(dest="command", required=True)

    block = sub.add_parser("block", help="requestor blocks target")
    block.add_argument("requestor")
    block.add_argument("target")

    friend = sub.add_parser("friend", help="make two users friends")
    friend.add_argument("users", nargs=2)

    sub.add_parser("stats", help="count edges by status")
    sub.add_parser("reset", help="delete every edge")
    return parser


async def run(args: argparse.Namespace) -> int:
    print(f"Connecting to database: {settings.database_url}")
    try:
        async with get_session_factory()() as session:
            store = RelationshipStore(session)

            if args.command == "block":
                for user in (args.requestor, args.target):
                    if not is_valid_identifier(user):
                        print(f"Invalid email: {user}")
                        return 2
                await store.block(args.requestor, args.target)
                print(f"{args.requestor} has blocked {args.target}")

            elif args.command == "friend":
                await RelationshipEngine(store).create_friendship(args.users)
                print(f"{args.users[0]} and {args.users[1]} are now friends")

            elif args.command == "reset":
                removed = await store.delete_all_edges()
                print(f"Deleted {removed} edges")

            elif args.command == "stats":
                result = await session.execute(
                    select(Relationship.status, func.count()).group_by(Relationship.status)
                )
                print("-" * 30)
                print(f"{'STATUS':<15} | {'EDGES':<10}")
                print("-" * 30)
                for status, count in result.all():
                    print(f"{status:<15} | {count:<10}")
                print("-" * 30)
    except AppError as e:
        print(f"Error [{e.code}]: {e.message}")
        return 1
    finally:
        await close_db_connection()
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(run(build_parser().parse_args())))
