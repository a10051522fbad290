from pathlib import Path

from chirpy.config import Settings
from main import _apply_overrides, _parse_args


def test_default_command_invokes_serve() -> None:
    args = _parse_args([])
    assert args.command == "serve"


def test_default_command_accepts_options_without_subcommand() -> None:
    args = _parse_args(["--host", "127.0.0.1", "--port", "8081"])
    assert args.command == "serve"
    assert args.host == "127.0.0.1"
    assert args.port == 8081


def test_admin_and_init_db_subcommands_available() -> None:
    assert _parse_args(["admin"]).command == "admin"
    assert _parse_args(["init-db"]).command == "init-db"


def test_overrides_replace_environment_settings(tmp_path: Path) -> None:
    settings = Settings(database_path=tmp_path / "db.sqlite3")
    args = _parse_args(["serve", "--port", "9090", "--filepath-root", str(tmp_path)])

    updated = _apply_overrides(settings, args)

    assert updated.port == 9090
    assert updated.host == settings.host
    assert updated.filepath_root == tmp_path.resolve()
    assert updated.database_path == settings.database_path
