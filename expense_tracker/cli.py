#!/usr/bin/env python3
"""Maintenance commands: reseed data, create an admin user, purge sessions."""
import argparse
import json
import sys

from sqlalchemy.exc import SQLAlchemyError

from expense_tracker.accounts.config import models as config_models, service as config_service
from expense_tracker.accounts.expenses import models as expense_models, service as expense_service
from expense_tracker.database import SessionLocal, init_db
from expense_tracker.errors import AppError
from expense_tracker.security.passwords import prompt_hidden
from expense_tracker.users import crud as user_crud, sessions


def load_json(path: str):
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def seed(db, config_path: str | None = None, expenses_path: str | None = None) -> dict:
    """Wipe expenses and the config document, then load optional fixtures."""
    removed = db.query(expense_models.Expense).delete()
    db.query(config_models.ExpenseConfig).delete()
    db.commit()

    if config_path:
        config_service.upsert(db, load_json(config_path), updated_by="seed")

    added = 0
    if expenses_path:
        for item in load_json(expenses_path):
            expense_service.add_expense(db, item)
            added += 1

    return {"removed": removed, "added": added}


def cmd_seed(args) -> int:
    if not args.yes:
        confirm = input("This deletes ALL expenses and the config. Type YES to proceed: ").strip()
        if confirm != "YES":
            print("Seed aborted.")
            return 1

    db = SessionLocal()
    try:
        result = seed(db, args.config, args.expenses)
    finally:
        db.close()

    print(f"[OK] Seed complete: removed {result['removed']} expense(s), added {result['added']}.")
    return 0


def cmd_create_admin(args) -> int:
    password = prompt_hidden("Enter admin password (hidden): ").strip()
    if not password:
        print("No password entered. Exiting.")
        return 1
    if password != prompt_hidden("Confirm admin password: ").strip():
        print("Passwords do not match. Exiting.")
        return 1

    db = SessionLocal()
    try:
        user = user_crud.create_user(db, args.name, password, args.relation, is_admin=True)
    finally:
        db.close()

    print(f"[OK] Created admin user '{user.name}'.")
    return 0


def cmd_purge_sessions(args) -> int:
    db = SessionLocal()
    try:
        deleted = sessions.purge_expired(db)
    finally:
        db.close()

    print(f"[OK] Removed {deleted} expired session(s).")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="expense-tracker", description=__doc__)
    sub = parser.add_subparsers(dest="command", required=True)

    p_seed = sub.add_parser("seed", help="Delete all expenses and config, then load optional JSON fixtures")
    p_seed.add_argument("--config", help="JSON file with the initial config document")
    p_seed.add_argument("--expenses", help="JSON file with a list of expenses")
    p_seed.add_argument("--yes", action="store_true", help="Skip the confirmation prompt")
    p_seed.set_defaults(func=cmd_seed)

    p_admin = sub.add_parser("create-admin", help="Create a user with the admin flag set")
    p_admin.add_argument("--name", required=True)
    p_admin.add_argument("--relation", default="self")
    p_admin.set_defaults(func=cmd_create_admin)

    p_purge = sub.add_parser("purge-sessions", help="Delete expired sessions")
    p_purge.set_defaults(func=cmd_purge_sessions)

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    try:
        init_db()
        return args.func(args)
    except AppError as exc:
        print(f"[ERROR] {exc.message}")
        return 2
    except (OSError, ValueError, SQLAlchemyError) as exc:
        print(f"[ERROR] {exc}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
