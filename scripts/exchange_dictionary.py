"""Import or export the dictionary from the command line.

Usage examples::

    python -m scripts.exchange_dictionary export backup.json
    python -m scripts.exchange_dictionary import shared_words.json \
        --database-url sqlite:///./wordquiz.db

    # Create the tables and seed the bundled dictionary when empty
    python -m scripts.exchange_dictionary seed

Imports merge into the existing dictionary: words already known (same
category and same word, ignoring case and surrounding spaces) keep their
learning progress.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

# Ensure project root is on sys.path when executed as a module or script.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.append(str(PROJECT_ROOT))

from wordquiz.core.config import settings
from wordquiz.db import session as session_module
from wordquiz.db.base import Base
from wordquiz.db.initial_data import seed_initial_data
from wordquiz.services.dictionary_exchange_service import DictionaryExchangeService

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Import, export or seed the vocabulary dictionary")
    parser.add_argument(
        "--database-url",
        dest="database_url",
        default=None,
        help="Override settings.DATABASE_URL for this run.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    export_parser = subparsers.add_parser("export", help="Write every word to a JSON document.")
    export_parser.add_argument("path", type=Path)

    import_parser = subparsers.add_parser("import", help="Merge a JSON document into the dictionary.")
    import_parser.add_argument("path", type=Path)

    subparsers.add_parser("seed", help="Create the tables and seed the bundled dictionary when empty.")
    return parser


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(level=logging.INFO)
    args = _build_parser().parse_args(argv)

    if args.database_url:
        session_module.configure_database(args.database_url)

    Base.metadata.create_all(bind=session_module.sync_engine)

    with session_module.SessionLocal() as db:
        if args.command == "seed":
            inserted = seed_initial_data(db, settings.SEED_WORDS_FILE)
            print(f"Seeded {inserted} words.")
            return 0

        service = DictionaryExchangeService(db)
        if args.command == "export":
            result = service.export_to_path(args.path)
            if not result.success:
                print(result.error_message, file=sys.stderr)
                return 1
            print(f"Exported {result.exported_count} words to {args.path}")
            return 0

        result = service.import_from_path(args.path)
        if not result.success:
            print(result.to_user_message(), file=sys.stderr)
            return 1
        print(result.to_user_message())
        return 0


if __name__ == "__main__":
    raise SystemExit(main())
