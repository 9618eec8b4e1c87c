#!/usr/bin/env python3
"""
Seed the Supabase tickets and transcripts tables.

Reads tickets.json / transcripts.json exports (a bare list or {"data": [...]})
from --data-dir, or the bundled sample rows with --mock, and upserts them in
batches via supabase-py.

Usage:
    cd backend
    PYTHONPATH=. python3 scripts/seed_database.py --data-dir ../data
    PYTHONPATH=. python3 scripts/seed_database.py --mock
    PYTHONPATH=. python3 scripts/seed_database.py --only tickets
    PYTHONPATH=. python3 scripts/seed_database.py --yes              # skip confirmation
"""

import argparse
import json
import os
import sys
import time

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

TABLE_KEYS = {
    "tickets": "ticket_key",
    "transcripts": "id",
}


def load_rows(path):
    """Read an export file; accepts a bare list or a {"data": [...]} envelope."""
    with open(path, encoding="utf-8") as fh:
        payload = json.load(fh)
    if isinstance(payload, dict):
        payload = payload.get("data", [])
    if not isinstance(payload, list):
        raise ValueError(f"{path} does not contain a list of records")
    return payload


def drop_unkeyed(rows, key):
    """Rows without the conflict key cannot be upserted; report and skip them."""
    kept = [r for r in rows if r.get(key) not in (None, "")]
    skipped = len(rows) - len(kept)
    if skipped:
        print(f"         skipping {skipped} row(s) without {key}")
    return kept


def batch_upsert(supabase, table, rows, on_conflict, batch_size=200):
    """Upsert rows in batches. Returns total upserted count."""
    total = 0
    for i in range(0, len(rows), batch_size):
        batch = rows[i : i + batch_size]
        try:
            supabase.table(table).upsert(batch, on_conflict=on_conflict).execute()
        except Exception as exc:
            batch_num = i // batch_size + 1
            print(
                f"\n  ERROR upserting {table} batch {batch_num} "
                f"(rows {i}-{i + len(batch) - 1}): {exc}",
                file=sys.stderr,
            )
            raise
        total += len(batch)
    return total


# ---------------------------------------------------------------------------
# Per-table seeding
# ---------------------------------------------------------------------------

def seed_table(supabase, kind, table, rows, batch_size):
    key = TABLE_KEYS[kind]
    print(f"  {kind} -> {table}")
    rows = drop_unkeyed(rows, key)
    started = time.time()
    n = batch_upsert(supabase, table, rows, key, batch_size=batch_size)
    print(f"         {n} rows in {time.time() - started:.1f}s")
    return n


def source_rows(args, kind):
    if args.mock:
        from app.data import MOCK_TICKET_ROWS, MOCK_TRANSCRIPT_ROWS

        return MOCK_TICKET_ROWS if kind == "tickets" else MOCK_TRANSCRIPT_ROWS

    path = os.path.join(args.data_dir, f"{kind}.json")
    if not os.path.exists(path):
        print(f"ERROR: export not found: {path}", file=sys.stderr)
        sys.exit(1)
    print(f"Reading {path} ...")
    return load_rows(path)


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def main():
    parser = argparse.ArgumentParser(description="Seed Supabase tickets and transcripts")
    source = parser.add_mutually_exclusive_group()
    source.add_argument(
        "--data-dir",
        default="data",
        help="Directory holding tickets.json and transcripts.json (default: data)",
    )
    source.add_argument(
        "--mock",
        action="store_true",
        help="Seed the bundled sample rows instead of export files",
    )
    parser.add_argument(
        "--only",
        choices=sorted(TABLE_KEYS),
        help="Seed a single table",
    )
    parser.add_argument(
        "--batch-size",
        type=int,
        default=200,
        help="Rows per upsert request (default: 200)",
    )
    parser.add_argument(
        "--yes", "-y",
        action="store_true",
        help="Skip confirmation prompt",
    )
    args = parser.parse_args()

    # Requires SUPABASE_URL + SUPABASE_SERVICE_ROLE_KEY in .env
    from app.core.config import get_settings
    from app.db.client import get_supabase

    settings = get_settings()
    tables = {"tickets": settings.tickets_table, "transcripts": settings.transcripts_table}
    kinds = [args.only] if args.only else list(tables)

    # Safety confirmation
    if not args.yes:
        origin = "bundled sample rows" if args.mock else args.data_dir
        print(f"Target:  {settings.supabase_url}")
        print(f"Source:  {origin}")
        print(f"Tables:  {', '.join(tables[k] for k in kinds)}")
        answer = input("Proceed? [y/N] ").strip().lower()
        if answer not in ("y", "yes"):
            print("Aborted.")
            sys.exit(0)

    supabase = get_supabase()
    print("Connected to Supabase.\n")

    for kind in kinds:
        seed_table(supabase, kind, tables[kind], source_rows(args, kind), args.batch_size)

    print("\nAll done!")


if __name__ == "__main__":
    main()
