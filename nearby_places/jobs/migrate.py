"""CLI job that applies pending schema migrations."""

import argparse
import logging
from pathlib import Path

from nearby_places.core import db

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Apply pending database migrations")
    parser.add_argument(
        "--directory",
        dest="directory",
        type=Path,
        default=db.MIGRATIONS_DIR,
        help="Directory holding *.sql migration files",
    )
    return parser


def main(argv=None) -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s - %(message)s")
    args = build_parser().parse_args(argv)

    try:
        applied = db.apply_migrations(directory=args.directory)
    finally:
        db.close_pool()

    if applied:
        logger.info("Applied %d migration(s): %s", len(applied), ", ".join(applied))
    else:
        logger.info("Database schema is up to date")


if __name__ == "__main__":
    main()
