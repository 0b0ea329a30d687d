"""Rentease command-line front-end.

Usage:
    python -m rentease register --email E --password P --confirm-password P \\
        --first-name F --last-name L --birth-date YYYY-MM-DD
    python -m rentease login --email E --password P
    python -m rentease logout
    python -m rentease profile [--first-name F --last-name L --birth-date D --password P]
    python -m rentease add-flat --city C --street S --number N --area A \\
        --year-built Y --price P --available-date D [--ac]
    python -m rentease flats [--city C] [--min-price N] [--max-price N] \\
        [--min-area N] [--max-area N] [--sort-by city|price|area] [--order asc|desc]
    python -m rentease favorites [same filters as ``flats``]
    python -m rentease favorite|unfavorite|remove-favorite \\
        --city C --street S --number N --area A --year-built Y

Each command is one user action: it opens the store, validates the session
where the page requires a login, runs the action, prints the resulting table
and exits.  Storage location and session window come from
:class:`~rentease.core.settings.Settings`.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from collections.abc import Sequence
from typing import Any

from pydantic import ValidationError

from rentease.accounts.session import SessionManager
from rentease.accounts.users import UserRepository, user_field
from rentease.core import configure_logging, new_action
from rentease.core.criteria import FilterCriteria
from rentease.core.exceptions import AccountError, ConfigError, SessionError, StorageError
from rentease.core.models import User
from rentease.core.pipeline import RenderedTable
from rentease.core.render import ControlKind, FlatRow
from rentease.core.settings import Settings, load_settings
from rentease.core.sorting import SortKey, SortOrder, SortState
from rentease.storage.collection_store import CollectionStore
from rentease.storage.database import LOCAL_STORAGE_TABLE, SESSION_STORAGE_TABLE, open_db
from rentease.storage.kv import KeyValueStore
from rentease.views.base import TableView
from rentease.views.favorites import FavoritesView
from rentease.views.flats import FlatsView
from rentease.views.new_flat import NewFlatForm

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------


def _add_filter_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--city", default=None, help="Case-insensitive city substring.")
    parser.add_argument("--min-price", default=None, metavar="N")
    parser.add_argument("--max-price", default=None, metavar="N")
    parser.add_argument("--min-area", default=None, metavar="N")
    parser.add_argument("--max-area", default=None, metavar="N")
    parser.add_argument("--sort-by", choices=[key.value for key in SortKey], default=None)
    parser.add_argument("--order", choices=[o.value for o in SortOrder], default=SortOrder.ASC.value)


def _add_identity_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--city", required=True)
    parser.add_argument("--street", required=True)
    parser.add_argument("--number", required=True)
    parser.add_argument("--area", required=True)
    parser.add_argument("--year-built", required=True)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rentease",
        description="Rental flat listings with filters, sorting and favorites.",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        metavar="LEVEL",
        help="Override LOG_LEVEL env var (DEBUG|INFO|WARNING|ERROR).",
    )
    parser.add_argument(
        "--log-format",
        default=None,
        metavar="FORMAT",
        help="Override LOG_FORMAT env var (text|json).",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    register = commands.add_parser("register", help="Create an account and log in.")
    register.add_argument("--email", required=True)
    register.add_argument("--password", required=True)
    register.add_argument("--confirm-password", required=True)
    register.add_argument("--first-name", required=True)
    register.add_argument("--last-name", required=True)
    register.add_argument("--birth-date", required=True, metavar="YYYY-MM-DD")

    login = commands.add_parser("login", help="Log in.")
    login.add_argument("--email", required=True)
    login.add_argument("--password", required=True)

    commands.add_parser("logout", help="Log out.")

    profile = commands.add_parser("profile", help="Show or update the logged-in profile.")
    profile.add_argument("--first-name")
    profile.add_argument("--last-name")
    profile.add_argument("--birth-date", metavar="YYYY-MM-DD")
    profile.add_argument("--password")

    add_flat = commands.add_parser("add-flat", help="Register a new flat.")
    add_flat.add_argument("--city", required=True)
    add_flat.add_argument("--street", required=True)
    add_flat.add_argument("--number", required=True)
    add_flat.add_argument("--area", required=True)
    add_flat.add_argument("--ac", action="store_true", help="The flat has air conditioning.")
    add_flat.add_argument("--year-built", required=True)
    add_flat.add_argument("--price", required=True)
    add_flat.add_argument("--available-date", required=True, metavar="YYYY-MM-DD")

    _add_filter_args(commands.add_parser("flats", help="List all flats."))
    _add_filter_args(commands.add_parser("favorites", help="List favorite flats."))

    _add_identity_args(commands.add_parser("favorite", help="Mark a flat as favorite."))
    _add_identity_args(commands.add_parser("unfavorite", help="Unmark a favorite flat."))
    _add_identity_args(
        commands.add_parser("remove-favorite", help="Remove a flat from the favorites view.")
    )
    return parser


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------


def format_table(table: RenderedTable) -> str:
    """Plain-text rendering of a :class:`RenderedTable`."""
    lines = [" | ".join(table.headers)]
    for row in table.rows:
        if isinstance(row, FlatRow):
            if row.control is ControlKind.CHECKBOX:
                control = "[x]" if row.checked else "[ ]"
            else:
                control = "[Remove]"
            lines.append(" | ".join((*row.cells, control)))
        else:
            lines.append(row.message)
    return "\n".join(lines)


def _identity(args: argparse.Namespace) -> dict[str, Any]:
    return {
        "city": args.city,
        "street": args.street,
        "number": args.number,
        "area": args.area,
        "yearBuilt": args.year_built,
    }


def _prepare(view: TableView, args: argparse.Namespace) -> RenderedTable:
    view.apply_filters(
        FilterCriteria.from_inputs(
            city=args.city,
            min_price=args.min_price,
            max_price=args.max_price,
            min_area=args.min_area,
            max_area=args.max_area,
        )
    )
    if args.sort_by:
        return view.apply_sort(SortState(sort_by=args.sort_by, order=SortOrder(args.order)))
    return view.table()


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


async def run_command(args: argparse.Namespace, settings: Settings) -> str:
    """Execute one command and return its printable output."""
    conn = await open_db(settings.database_path_resolved)
    try:
        collections = CollectionStore(KeyValueStore(conn, LOCAL_STORAGE_TABLE))
        session = SessionManager(
            KeyValueStore(conn, SESSION_STORAGE_TABLE),
            duration_ms=settings.session_duration_ms,
        )
        users = UserRepository(collections)

        if args.command == "register":
            user = User(
                email=args.email,
                password=args.password,
                firstName=args.first_name,
                lastName=args.last_name,
                birthDate=args.birth_date,
            )
            await users.register(user, confirm_password=args.confirm_password)
            await session.login(user.email)
            return "Registration successful! You are now logged in."

        if args.command == "login":
            record = await users.authenticate(args.email, args.password)
            await session.login(record["email"])
            return f"Welcome, {await users.greeting_name(record['email'])}."

        if args.command == "logout":
            await session.logout()
            return "You have been logged out."

        if args.command == "profile":
            email = await session.validate()
            updates = (args.first_name, args.last_name, args.birth_date, args.password)
            if any(value is not None for value in updates):
                current = await users.find(email) or {}
                await users.update_profile(
                    email,
                    first_name=args.first_name or user_field(current, "firstName") or "",
                    last_name=args.last_name or user_field(current, "lastName") or "",
                    birth_date=args.birth_date or user_field(current, "birthDate") or "",
                    password=args.password or user_field(current, "password") or "",
                )
                return "Profile updated successfully!"
            return f"Logged in as {await users.greeting_name(email)} <{email}>"

        if args.command == "add-flat":
            form = await NewFlatForm.open(
                collections, session, cities_path=settings.cities_path_resolved
            )
            await form.submit(
                city=args.city,
                street=args.street,
                number=args.number,
                area=args.area,
                ac=args.ac,
                yearBuilt=args.year_built,
                price=args.price,
                availableDate=args.available_date,
            )
            return "Flat added successfully!"

        if args.command == "flats":
            flats_view = await FlatsView.open(collections, session)
            return format_table(_prepare(flats_view, args))

        if args.command == "favorites":
            favorites_view = await FavoritesView.open(collections, session)
            return format_table(_prepare(favorites_view, args))

        if args.command in ("favorite", "unfavorite"):
            flats_view = await FlatsView.open(collections, session)
            identity = _identity(args)
            record = flats_view.find(identity) or identity
            table = await flats_view.toggle_favorite(record, args.command == "favorite")
            return format_table(table)

        if args.command == "remove-favorite":
            favorites_view = await FavoritesView.open(collections, session)
            identity = _identity(args)
            record = favorites_view.find(identity) or identity
            return format_table(await favorites_view.remove(record))

        raise ValueError(f"Unknown command {args.command!r}")
    finally:
        await conn.close()


def main(argv: Sequence[str] | None = None) -> None:
    """CLI entry-point registered in ``pyproject.toml``."""
    args = build_parser().parse_args(argv)

    try:
        configure_logging(level=args.log_level, fmt=args.log_format)
    except ValueError as exc:
        print(f"rentease: configuration error: {exc}", file=sys.stderr)  # noqa: T201
        sys.exit(1)

    try:
        settings = load_settings()
        with new_action(args.command):
            output = asyncio.run(run_command(args, settings))
    except ConfigError as exc:
        logger.critical("Configuration error: %s", exc)
        sys.exit(1)
    except SessionError as exc:
        logger.info("Session check failed: %s", exc)
        print(f"rentease: {exc}", file=sys.stderr)  # noqa: T201
        sys.exit(2)
    except (AccountError, StorageError, ValidationError) as exc:
        print(f"rentease: {exc}", file=sys.stderr)  # noqa: T201
        sys.exit(1)

    print(output)  # noqa: T201


if __name__ == "__main__":
    main()
