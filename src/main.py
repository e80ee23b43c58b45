"""Main entry point for the terminal to-do list.

Settings come from the environment (or the project .env file); command
line options override them.
"""
import logging
from pathlib import Path
from typing import Optional

import click

from cli import CLI
from config import Settings, load_settings
from storage import Storage
from store import TaskStore

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(settings: Settings) -> None:
    level = getattr(logging, settings.log_level.upper(), logging.WARNING)
    if settings.log_file is not None:
        settings.log_file.parent.mkdir(parents=True, exist_ok=True)
        logging.basicConfig(level=level, format=LOG_FORMAT, filename=str(settings.log_file))
    else:
        logging.basicConfig(level=level, format=LOG_FORMAT)


def build_store(settings: Settings) -> TaskStore:
    store = TaskStore(Storage(settings.data_dir))
    store.initialize()
    return store


@click.command()
@click.option('--data-dir', type=click.Path(file_okay=False, path_type=Path),
              help="Directory holding todos-v1.json (env: TODOS_DATA_DIR).")
@click.option('--alt-screen/--no-alt-screen', default=None,
              help="Use the terminal's alternate screen (env: TODOS_ALT_SCREEN).")
@click.option('--log-level', type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                                               case_sensitive=False),
              help="Logging level (env: TODOS_LOG_LEVEL).")
@click.option('--log-file', type=click.Path(dir_okay=False, path_type=Path),
              help="Write logs to this file instead of stderr (env: TODOS_LOG_FILE).")
def main(data_dir: Optional[Path], alt_screen: Optional[bool],
         log_level: Optional[str], log_file: Optional[Path]) -> None:
    """Manage a to-do list in the terminal."""
    settings = load_settings()
    if data_dir is not None:
        settings.data_dir = data_dir
    if alt_screen is not None:
        settings.alt_screen = alt_screen
    if log_level is not None:
        settings.log_level = log_level.upper()
    if log_file is not None:
        settings.log_file = log_file
    configure_logging(settings)
    store = build_store(settings)
    CLI(store, alt_screen=settings.alt_screen).run()


if __name__ == "__main__":
    main()
