import logging
from pathlib import Path
from typing import Optional

# Global Config
APP_NAME = "GYM Management System"

REGULAR_DB_NAME = "regular_members.txt"
PREMIUM_DB_NAME = "premium_members.txt"

# Hidden file in the user's home directory remembering the data folder
CONFIG_FILE_NAME = ".gym_members_config"

LOG_LEVEL = logging.INFO
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# Runtime paths, filled in by services.file_manager.init_paths
DATA_FOLDER: Optional[Path] = None
REGULAR_FILE: Optional[Path] = None
PREMIUM_FILE: Optional[Path] = None
