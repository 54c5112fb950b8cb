from pathlib import Path
import logging
import os
import sys

from dotenv import load_dotenv

# Ensure the src directory is on sys.path when running as a script
_SRC_DIR = Path(__file__).resolve().parents[1]
if str(_SRC_DIR) not in sys.path:
    sys.path.insert(0, str(_SRC_DIR))

from chronicles.bootstrap import create_game_service
from chronicles.presentation.cli import main_menu


def setup_logging() -> None:
    level_name = os.getenv("CHRONICLES_LOG_LEVEL", "WARNING").strip().upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main() -> None:
    load_dotenv()
    setup_logging()
    try:
        game_service = create_game_service()
        main_menu(game_service)
    except (KeyboardInterrupt, EOFError):
        print("\nSession ended.")


if __name__ == "__main__":
    main()
