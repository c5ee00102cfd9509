"""
Application Initialization
==========================
This module wires the Store, the controllers and the Main Window together and
starts the Qt Event Loop.

Why is this file needed?
------------------------
It acts as the "Dependency Injection" root. It:
1. Parses the command line and sets up logging.
2. Instantiates the central Store (Model).
3. Instantiates the Main Window (View) and hands it the Store.
4. Kicks off loading of the requested (or bundled) particle file.
"""
import argparse
import logging
import os
import sys
from typing import Optional, Sequence

from fluidbrush import config
from fluidbrush.logging_config import parse_level, setup_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fluidbrush",
        description="Brush through a 3D particle simulation with linked 3D and cross-section views.",
    )
    parser.add_argument(
        "path",
        nargs="?",
        default=None,
        help=f"Particle CSV file (default: {os.path.relpath(config.DEFAULT_DATA_PATH)} if present)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        type=parse_level,
        help="DEBUG, INFO, WARNING or ERROR (default: INFO)",
    )
    parser.add_argument("--log-file", default=None, help="Also write the log to this file")
    return parser


def resolve_data_path(path: Optional[str]) -> Optional[str]:
    """An explicit path is always used; otherwise the bundled sample, if it exists."""
    if path:
        return path
    if os.path.isfile(config.DEFAULT_DATA_PATH):
        return config.DEFAULT_DATA_PATH
    logger.info("No data file given and no bundled sample found; starting empty.")
    return None


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    # 1. Setup Logging (Console + Optional File)
    setup_logging(level=args.log_level, log_file=args.log_file)

    # Qt imports stay here so the parser works without a display
    from fluidbrush.app import create_app
    from fluidbrush.model.state import Store
    from fluidbrush.view.main_window import MainWindow

    # 2. Create the Qt Application
    app = create_app()

    # 3. Initialize the Data Model
    store = Store()

    # 4. Initialize the Main Window, passing the model
    window = MainWindow(store)
    window.show()

    data_path = resolve_data_path(args.path)
    if data_path:
        window.load_file(data_path)

    # 5. Start Event Loop
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
