#!/usr/bin/env python3
"""Dual-write and read-routing example for Dual DB Sync.

This example demonstrates:
1. Building a coordinator over two SQLite databases
2. Writing to primary then replica
3. Reads alternating between primary and replica
4. A replica failure leaving the stores diverged
5. Unsupported statements touching neither store

Run this example:
    python examples/dual_write_example.py
"""

import sqlite3
import tempfile
from pathlib import Path

from dual_db_sync import DbInfo, Driver, SyncConfig, SyncCoordinator
from dual_db_sync.sync.dual_write import DivergenceRecord


def on_divergence(record: DivergenceRecord):
    """Callback when the replica misses a write the primary committed."""
    print(f"    [CALLBACK] Diverged [{record.fingerprint}]: {record.error}")


def sqlite_info(path: Path) -> DbInfo:
    return DbInfo(ip="localhost", user="", dbname=str(path), password="", driver=Driver.SQLITE)


def count_rows(path: Path, table: str) -> int:
    conn = sqlite3.connect(str(path))
    try:
        return conn.execute(f"SELECT COUNT(*) FROM {table}").fetchone()[0]
    finally:
        conn.close()


def main():
    print("=" * 60)
    print("Dual DB Sync - Dual-Write Example")
    print("=" * 60)

    with tempfile.TemporaryDirectory() as temp_dir:
        temp_path = Path(temp_dir)
        primary_db = temp_path / "primary.db"
        replica_db = temp_path / "replica.db"

        for path in (primary_db, replica_db):
            conn = sqlite3.connect(str(path))
            conn.execute("CREATE TABLE t (a TEXT)")
            conn.commit()
            conn.close()

        config = SyncConfig(primary=sqlite_info(primary_db), replica=sqlite_info(replica_db))

        # ---------------------------------------------------------------------
        # Step 1: Create coordinator
        # ---------------------------------------------------------------------
        print("\n[1] Connecting to primary and replica...")
        coordinator = SyncCoordinator.from_config(config)
        coordinator.executor.on_divergence = on_divergence

        with coordinator:
            # -----------------------------------------------------------------
            # Step 2: Dual write
            # -----------------------------------------------------------------
            print("\n[2] Writing (primary FIRST, replica second)...")
            outcome = coordinator.synchronize("INSERT INTO t (a) VALUES ('one')")
            print(f"    {outcome.message}")
            print(f"    Primary rows: {count_rows(primary_db, 't')}")
            print(f"    Replica rows: {count_rows(replica_db, 't')}")

            # -----------------------------------------------------------------
            # Step 3: Alternating reads
            # -----------------------------------------------------------------
            print("\n[3] Reading (primary, replica, primary, ...)...")
            for _ in range(3):
                outcome = coordinator.synchronize("-- audit\nSELECT a FROM t")
                print(f"    {outcome.target.value}: {outcome.values}")

            # -----------------------------------------------------------------
            # Step 4: Divergence
            # -----------------------------------------------------------------
            print("\n[4] Dropping the replica table to force divergence...")
            conn = sqlite3.connect(str(replica_db))
            conn.execute("DROP TABLE t")
            conn.commit()
            conn.close()

            outcome = coordinator.synchronize("INSERT INTO t (a) VALUES ('two')")
            print(f"    Success: {outcome.success}")
            print(f"    Diverged: {outcome.write_result.diverged}")
            print(f"    Primary rows: {count_rows(primary_db, 't')}")
            print(f"    Ledger: {[r.statement for r in coordinator.executor.get_diverged()]}")

            # -----------------------------------------------------------------
            # Step 5: Unsupported
            # -----------------------------------------------------------------
            print("\n[5] Unsupported statement...")
            outcome = coordinator.synchronize("DROP TABLE t")
            print(f"    {outcome.message}")
            print(f"    Primary rows still: {count_rows(primary_db, 't')}")

    print("\n" + "=" * 60)
    print("""
Write Order:
  1. Primary  - committed immediately
  2. Replica  - if it fails the stores diverge; nothing is rolled back

Read Order:
  Alternates primary / replica on every read, even after a failed read.
""")


if __name__ == "__main__":
    main()
