#!/usr/bin/env python
"""Utility CLI for importing coaching evaluation workbooks."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from database.repositories import UserRepository
from database.session import database_session_factory, session_scope
from processing.import_errors import WorkbookReadError
from services.evaluation_import_service import EvaluationImportService
from services.import_models import ImportingUser, ImportPreview, resolve_import_role
from utils.logging_utils import setup_logging


def _print_json(data: dict) -> None:
    print(json.dumps(data, indent=2, default=str))


def _parse_selections(values: list[str] | None) -> dict[str, int]:
    selections: dict[str, int] = {}
    for value in values or []:
        name, sep, coach_id = value.rpartition("=")
        if not sep or not name.strip():
            raise ValueError(f"Invalid selection '{value}', expected 'Engineer Name=coach_id'")
        selections[name.strip()] = int(coach_id)
    return selections


def _load_user(session, user_id: int) -> ImportingUser | None:
    user = UserRepository(session).get_active_by_id(user_id)
    return ImportingUser.from_user(user) if user else None


def cmd_add_user(args: argparse.Namespace) -> int:
    with session_scope(database_session_factory(args.db)) as session:
        user = UserRepository(session).create(
            name=args.name,
            email=args.email,
            is_admin=args.admin,
            is_coach=args.coach,
            is_lead=args.lead,
            is_manager=args.manager,
        )
        _print_json({"id": user.id, "name": user.name})
    return 0


def cmd_preview(args: argparse.Namespace) -> int:
    workbook = Path(args.file)
    with session_scope(database_session_factory(args.db)) as session:
        user = _load_user(session, args.user_id)
        if user is None:
            print(f"User {args.user_id} not found.")
            return 1
        try:
            preview = EvaluationImportService(session).preview_import(
                workbook.read_bytes(), workbook.name, user, resolve_import_role(user, args.role)
            )
        except WorkbookReadError as e:
            print(str(e))
            return 1
        _print_json(preview.to_dict())
    return 0


def cmd_commit(args: argparse.Namespace) -> int:
    try:
        selections = _parse_selections(args.select)
    except ValueError as e:
        print(str(e))
        return 1

    with session_scope(database_session_factory(args.db)) as session:
        user = _load_user(session, args.user_id)
        if user is None:
            print(f"User {args.user_id} not found.")
            return 1
        role = resolve_import_role(user, args.role)
        service = EvaluationImportService(session)

        if args.preview:
            preview = ImportPreview.from_dict(json.loads(Path(args.preview).read_text(encoding="utf-8")))
        else:
            workbook = Path(args.file)
            try:
                preview = service.preview_import(workbook.read_bytes(), workbook.name, user, role)
            except WorkbookReadError as e:
                print(str(e))
                return 1

        result = service.commit_import(preview, args.year, selections, user, role)
        _print_json(result.to_dict())
    return 0 if result.success else 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Coaching evaluation import tooling.")
    parser.add_argument("--db", type=Path, default=None, help="SQLite database path (default: configured path).")
    subparsers = parser.add_subparsers(dest="command")

    user_parser = subparsers.add_parser("add-user", help="Create a user.")
    user_parser.add_argument("--name", required=True, help="Display name.")
    user_parser.add_argument("--email", default=None, help="Email address.")
    for flag in ("admin", "coach", "lead", "manager"):
        user_parser.add_argument(f"--{flag}", action="store_true", help=f"Grant the {flag} role.")
    user_parser.set_defaults(func=cmd_add_user)

    preview_parser = subparsers.add_parser("preview", help="Preview a workbook import.")
    preview_parser.add_argument("--file", required=True, help="Workbook (.xlsx) to preview.")
    preview_parser.add_argument("--user-id", type=int, required=True, help="Importing user id.")
    preview_parser.add_argument("--role", choices=["coach", "lead", "admin"], default=None, help="Requested import role.")
    preview_parser.set_defaults(func=cmd_preview)

    commit_parser = subparsers.add_parser("commit", help="Import a workbook.")
    source = commit_parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--file", help="Workbook (.xlsx) to import.")
    source.add_argument("--preview", help="Preview JSON previously printed by 'preview'.")
    commit_parser.add_argument("--year", type=int, required=True, help="Evaluation year.")
    commit_parser.add_argument("--user-id", type=int, required=True, help="Importing user id.")
    commit_parser.add_argument("--role", choices=["coach", "lead", "admin"], default=None, help="Requested import role.")
    commit_parser.add_argument(
        "--select",
        action="append",
        metavar="NAME=COACH_ID",
        help="Coach selection for an engineer (-1 keep current, -2 use workbook coach).",
    )
    commit_parser.set_defaults(func=cmd_commit)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not hasattr(args, "func"):
        parser.print_help()
        return 1
    setup_logging()
    return args.func(args)


if __name__ == "__main__":
    raise SystemExit(main())
