import logging
import sys

import config
from ui.main_window import GymApp

"""
Entry point for the GYM Management System.
Run this file to start the application.
"""


def main() -> int:
    logging.basicConfig(level=config.LOG_LEVEL, format=config.LOG_FORMAT)

    # Create the Application instance
    app = GymApp(sys.argv)

    # Custom start method (handles paths, loading and the main window)
    app.start()

    # Start the event loop
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
