"""Promotions database management CLI.

Creates and drops the database schema for the promotions domain using the
setup_db/drop_db utilities in ``promotions.utils.db``.

Usage:
    PROTEAN_ENV=production python src/manage.py setup-db   # Create all tables
    PROTEAN_ENV=production python src/manage.py drop-db    # Drop all tables
"""

import argparse
import sys


def setup_databases():
    """Create the database schema for the promotions domain."""
    from promotions.domain import promotions
    from promotions.utils.db import setup_db

    print("Initializing promotions domain...")
    promotions.init()
    print("Creating promotions database schema...")
    providers = setup_db(promotions)
    if providers:
        print(f"  schema ready on: {', '.join(providers)}")
    else:
        print("  no SQL providers configured; nothing to create.")

    print("Done.")
    return providers


def drop_databases():
    """Drop the database schema for the promotions domain."""
    from promotions.domain import promotions
    from promotions.utils.db import drop_db

    print("Initializing promotions domain...")
    promotions.init()
    print("Dropping promotions database schema...")
    providers = drop_db(promotions)
    if providers:
        print(f"  schema dropped on: {', '.join(providers)}")
    else:
        print("  no SQL providers configured; nothing to drop.")

    print("Done.")
    return providers


def main(argv=None):
    parser = argparse.ArgumentParser(description="Promotions database management")
    parser.add_argument("command", choices=["setup-db", "drop-db"])
    args = parser.parse_args(argv)

    if args.command == "setup-db":
        setup_databases()
    else:
        drop_databases()
    return 0


if __name__ == "__main__":
    sys.exit(main())
