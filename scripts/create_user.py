import argparse
import os
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from dotenv import load_dotenv

from chirpy.database import Database, StoreError, resolve_database_path


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Create a Chirpy user")
    parser.add_argument("email", help="Unique email address for the user")
    parser.add_argument(
        "--db",
        dest="db_url",
        default=None,
        help="Database location (defaults to DB_URL or data/chirpy.sqlite3)",
    )
    return parser.parse_args()


def main() -> int:
    load_dotenv()
    args = parse_args()

    db_path = resolve_database_path(args.db_url or os.getenv("DB_URL"))

    database = Database(db_path)
    database.initialize()

    try:
        user = database.create_user(args.email.strip())
    except StoreError as exc:  # duplicates, etc.
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    print(f"Created user {user.id} <{user.email}>")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
