#!/usr/bin/env python3
"""
Database health check and initialization script.

Usage:
    python scripts/check_db.py                 # Check connectivity
    python scripts/check_db.py --init          # Initialize schema
    python scripts/check_db.py --init --seed   # Also seed the starter sites
"""

from __future__ import annotations

import argparse
import os
import sys

# Add src to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


def dolt_connection():
    """Build a Dolt connection from DOLT_* environment variables."""
    from src.db import DoltConnection

    return DoltConnection(
        host=os.getenv("DOLT_HOST", "localhost"),
        port=int(os.getenv("DOLT_PORT", "3306")),
        user=os.getenv("DOLT_USER", "root"),
        password=os.getenv("DOLT_PASSWORD", "doltpass"),
        database=os.getenv("DOLT_DATABASE", "excavation"),
    )


def check_dolt() -> bool:
    """Check Dolt database connectivity."""
    conn = dolt_connection()
    print(f"Checking Dolt at {conn.config['host']}:{conn.config['port']}...")

    try:
        db_conn = conn.get_connection()
        if db_conn.is_connected():
            print("  Dolt: Connected")
            conn.close()
            return True
        else:
            print("  Dolt: Connection failed")
            return False
    except Exception as e:
        print(f"  Dolt: Error - {e}")
        return False


def init_dolt() -> bool:
    """Initialize Dolt schema."""
    from src.db import init_dolt_schema

    print("Initializing Dolt schema...")

    try:
        init_dolt_schema(dolt_connection())
        print("  Dolt schema initialized")
        return True
    except Exception as e:
        print(f"  Dolt init error: {e}")
        return False


def seed_sites() -> bool:
    """Save the starter sites."""
    from src.content.starter_sites import create_starter_sites
    from src.db import DoltRepository

    print("Seeding starter sites...")

    try:
        result = create_starter_sites(DoltRepository(dolt_connection()))
        for name in result.sites:
            print(f"  {name}")
        return True
    except Exception as e:
        print(f"  Seed error: {e}")
        return False


def main() -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Check and initialize the excavation database")
    parser.add_argument("--init", action="store_true", help="Initialize database schema")
    parser.add_argument("--seed", action="store_true", help="Seed starter sites (with --init)")
    args = parser.parse_args()

    print("Excavation Database Check")
    print("=" * 40)

    dolt_ok = check_dolt()

    if args.init and dolt_ok:
        print()
        print("Schema Initialization")
        print("=" * 40)
        dolt_ok = init_dolt()
        if dolt_ok and args.seed:
            dolt_ok = seed_sites()

    print()
    print("Summary")
    print("=" * 40)
    print(f"  Dolt:  {'OK' if dolt_ok else 'FAILED'}")

    return 0 if dolt_ok else 1


if __name__ == "__main__":
    sys.exit(main())
