"""Create the database if needed and apply schema.sql (safe to re-run)."""
from __future__ import annotations

import argparse
import importlib
import logging

from dotenv import load_dotenv

from config import get_settings_module

from attendance_ledger.database.bootstrap import SCHEMA_PATH, apply_schema, list_tables


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Initialize the attendance ledger schema")
    parser.add_argument("--schema", default=str(SCHEMA_PATH), help="Path to the schema file")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    load_dotenv(override=False)
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    apply_schema(db_config, schema_path=args.schema)
    tables = list_tables(db_config)
    print(
        f"OK: {db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/"
        f"{db_config.get('database')} tables={', '.join(sorted(tables))}"
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
