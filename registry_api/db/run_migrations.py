"""
Programmatic Alembic migration runner.

Allows running migrations without an alembic.ini by configuring the script location
to this package's migrations directory.

Usage examples:
    python -m registry_api.db.run_migrations upgrade head
    python -m registry_api.db.run_migrations downgrade -1
    python -m registry_api.db.run_migrations current
"""

import sys
from pathlib import Path
from typing import List, Optional

from alembic import command
from alembic.config import Config

from registry_api.db.config import get_settings, to_sync_url


def build_config(url: Optional[str] = None) -> Config:
    """
    Alembic Config pointing at the migrations folder next to this file.

    `url` selects the database to migrate; it defaults to the environment's
    database settings. env.py reads it back from the 'sqlalchemy.url' option.
    """
    cfg = Config()
    script_location = Path(__file__).resolve().parent / "migrations"
    cfg.set_main_option("script_location", str(script_location))
    target = to_sync_url(url) if url else get_settings().sync_database_url
    # ConfigParser interpolation treats '%' as a directive.
    cfg.set_main_option("sqlalchemy.url", target.replace("%", "%%"))
    return cfg


# PUBLIC_INTERFACE
def main(argv: List[str] | None = None, url: Optional[str] = None) -> None:
    """Run Alembic command with programmatic configuration."""
    args = list(sys.argv[1:] if argv is None else argv)
    if not args:
        print("No Alembic arguments provided. Example: upgrade head")
        sys.exit(1)

    cfg = build_config(url)
    cmd, other = args[0], args[1:]

    if cmd == "upgrade":
        command.upgrade(cfg, *(other or ["head"]))
    elif cmd == "downgrade":
        command.downgrade(cfg, *(other or ["-1"]))
    elif cmd == "history":
        command.history(cfg, *other)
    elif cmd == "current":
        command.current(cfg, *other)
    elif cmd == "heads":
        command.heads(cfg, *other)
    else:
        print(f"Unsupported Alembic command: {cmd}")
        sys.exit(2)


if __name__ == "__main__":
    main()
