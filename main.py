"""Command-line interface for the Chirpy API server."""

from __future__ import annotations
import argparse
import logging
import re
import sys
from dataclasses import replace
from pathlib import Path
from typing import Sequence

try:
    import httpx
except ImportError as exc:  # pragma: no cover - exercised in environments missing deps
    raise SystemExit(
        "The 'httpx' package is required. Install the project with "
        "`pip install -e .` to install dependencies."
    ) from exc

from chirpy.config import Settings, load_settings
from chirpy.database import Database, StoreError

logger = logging.getLogger("chirpy.main")

_DEFAULT_SERVICE_URL = "http://localhost:8080"
_VISIT_COUNT = re.compile(r"visited (\d+) times")


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Chirpy API server utilities")
    subparsers = parser.add_subparsers(dest="command")

    parser.set_defaults(command="serve")

    subparsers.add_parser("init-db", help="Initialise the Chirpy database")

    serve_parser = subparsers.add_parser("serve", help="Start the HTTP API server")
    serve_parser.add_argument(
        "--host",
        default=None,
        help="Bind address for the API (default: CHIRPY_HOST or 0.0.0.0)",
    )
    serve_parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port for the HTTP API (default: CHIRPY_PORT or 8080)",
    )
    serve_parser.add_argument(
        "--filepath-root",
        default=None,
        help="Directory served under /app/ (default: CHIRPY_FILEPATH_ROOT or the working directory)",
    )

    admin_parser = subparsers.add_parser(
        "admin", help="Launch the interactive administration console"
    )
    admin_parser.add_argument(
        "--service-url",
        default=None,
        help=f"Base URL of a running Chirpy server (default: {_DEFAULT_SERVICE_URL})",
    )

    args_list = list(argv) if argv is not None else sys.argv[1:]
    known_commands = {"serve", "admin", "init-db"}

    if not args_list:
        args_list = ["serve"]
    else:
        first = args_list[0]
        if first in ("-h", "--help"):
            return parser.parse_args(args_list)
        if first not in known_commands:
            if any(flag in args_list for flag in ("-h", "--help")):
                return parser.parse_args(args_list)
            args_list = ["serve", *args_list]

    return parser.parse_args(args_list)


def _initialise_database(settings: Settings) -> Database:
    database = Database(settings.database_path)
    database.initialize()
    logger.info("Database initialised at %s", settings.database_path)
    return database


def _apply_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    overrides = {}
    if getattr(args, "host", None):
        overrides["host"] = args.host
    if getattr(args, "port", None):
        overrides["port"] = args.port
    if getattr(args, "filepath_root", None):
        overrides["filepath_root"] = Path(args.filepath_root).expanduser().resolve(strict=False)
    return replace(settings, **overrides)


def _serve(*, settings: Settings, database: Database) -> None:
    from chirpy.service import create_app
    import uvicorn

    logger.info("Starting Chirpy on http://%s:%s", settings.host, settings.port)

    app = create_app(settings=settings, database=database)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level="info")


def _run_admin_cli(database: Database, *, service_url: str | None = None) -> None:
    """Provide an interactive console for administrators."""

    base_url = (service_url or _DEFAULT_SERVICE_URL).rstrip("/")

    print("Chirpy Administration Console")
    print("Press Ctrl+C at any time to exit.\n")

    try:
        while True:
            print("Select an option:")
            print("  1) List all users")
            print("  2) Add a new user")
            print("  3) Show file server visit count")
            print("  4) Reset visit count and delete all users")
            print("  5) Exit")

            choice = input("Enter choice [1-5]: ").strip()

            if choice == "1":
                _list_users(database)
            elif choice == "2":
                _add_user(database)
            elif choice == "3":
                _show_metrics(base_url)
            elif choice == "4":
                _reset_service(base_url)
            elif choice == "5":
                print("Goodbye!")
                return
            else:
                print("Invalid selection. Please choose a number from the menu.\n")

            print()
    except KeyboardInterrupt:
        print("\nExiting administration console.")


def _list_users(database: Database) -> None:
    users = database.list_users()
    if not users:
        print("No users are currently registered.")
        return

    print(f"{len(users)} user(s) found:")
    print(f"{'ID':<36}  {'Email':<32}  Created")
    print("-" * 90)
    for user in users:
        created = user.created_at.strftime("%Y-%m-%d %H:%M:%S %Z")
        print(f"{str(user.id):<36}  {user.email:<32}  {created}")


def _add_user(database: Database) -> None:
    print("\nCreate a new user (leave the email blank to cancel).")
    email = input("Email address: ").strip()
    if not email:
        print("User creation cancelled.")
        return

    try:
        user = database.create_user(email)
    except StoreError as exc:
        print(f"Failed to create user: {exc}")
        return

    print(f"Created user {user.id} <{user.email}>")


def _show_metrics(base_url: str) -> None:
    try:
        response = httpx.get(f"{base_url}/admin/metrics", timeout=10.0)
    except httpx.HTTPError as exc:
        print(f"Failed to contact Chirpy: {exc}")
        return

    if response.status_code != 200:
        print(f"Service responded with {response.status_code}: {response.text.strip()}")
        return

    match = _VISIT_COUNT.search(response.text)
    if match is None:
        print("Service returned an unexpected metrics page.")
        return
    print(f"The file server has been visited {match.group(1)} time(s).")


def _reset_service(base_url: str) -> None:
    confirmation = input("This deletes every user. Type 'reset' to continue: ").strip()
    if confirmation != "reset":
        print("Reset cancelled.")
        return

    try:
        response = httpx.post(f"{base_url}/admin/reset", timeout=10.0)
    except httpx.HTTPError as exc:
        print(f"Failed to contact Chirpy: {exc}")
        return

    if response.status_code == 403:
        print("Reset refused: the server is not running with PLATFORM=dev.")
        return
    if response.status_code != 200:
        print(f"Service responded with {response.status_code}: {response.text.strip()}")
        return
    print(response.text.strip() or "Reset complete.")


def main(argv: Sequence[str] | None = None) -> None:
    """Entry point for CLI usage."""

    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(message)s")

    args = _parse_args(argv)
    settings = _apply_overrides(load_settings(), args)
    database = _initialise_database(settings)

    if args.command == "serve":
        _serve(settings=settings, database=database)
    elif args.command == "admin":
        _run_admin_cli(database, service_url=args.service_url)
    elif args.command == "init-db":
        print("Database initialisation complete.")


if __name__ == "__main__":
    main()
