"""Operator tool: physically delete a user and, by cascade, all of its events.

Soft delete (DELETE /api/users/<id>) is the normal path; this is for
data-removal requests only.
"""
from __future__ import annotations

import argparse
import importlib
import sys

from dotenv import load_dotenv

from config import get_settings_module

from attendance_ledger.container import build_container
from attendance_ledger.core.exceptions import DomainError


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Hard-delete a user and their attendance events")
    parser.add_argument("user_id", help="Id of the user to purge")
    parser.add_argument("--yes", action="store_true", help="Skip the confirmation prompt")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    container = build_container(settings=settings)

    if not args.yes:
        answer = input(f"Permanently delete user {args.user_id} and all their events? [y/N] ")
        if answer.strip().lower() not in {"y", "yes"}:
            print("Aborted.")
            return 1

    try:
        removed = container.identity_service.hard_delete_user(args.user_id)
    except DomainError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    print(f"Deleted user {args.user_id} ({removed} events removed)")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
