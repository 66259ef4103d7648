import logging
import sys
from pathlib import Path
from typing import Optional

import config

logger = logging.getLogger(__name__)


def ensure_folder(p: Path) -> None:
    """Creates the folder if it does not exist."""
    p.mkdir(parents=True, exist_ok=True)


def default_config_file() -> Path:
    return Path.home() / config.CONFIG_FILE_NAME


def init_paths(base_path: Path) -> None:
    """
    Initialize the member file paths based on the selected base path.
    Both files live directly in the data folder.
    """
    config.DATA_FOLDER = Path(base_path)
    ensure_folder(config.DATA_FOLDER)

    config.REGULAR_FILE = config.DATA_FOLDER / config.REGULAR_DB_NAME
    config.PREMIUM_FILE = config.DATA_FOLDER / config.PREMIUM_DB_NAME


def read_saved_data_path(config_file: Optional[Path] = None) -> Optional[Path]:
    """
    Returns the data folder remembered from a previous run.
    None if nothing was saved, the file is unreadable or the folder is gone.
    """
    config_file = config_file or default_config_file()
    if not config_file.exists():
        return None

    try:
        content = config_file.read_text(encoding="utf-8").strip()
    except OSError as e:
        logger.warning("Could not read %s: %s", config_file, e)
        return None

    if not content:
        return None
    data_path = Path(content)
    return data_path if data_path.exists() else None


def save_data_path(data_path: Path, config_file: Optional[Path] = None) -> None:
    config_file = config_file or default_config_file()
    config_file.write_text(str(data_path), encoding="utf-8")


def load_or_setup_paths(config_file: Optional[Path] = None) -> Path:
    """
    Loads the data path from the local config file.
    If not found, prompts the user to select a folder via a dialog and falls
    back to the current working directory when the dialog is cancelled.

    Returns:
        Path: The data folder now in use.
    """
    # 1. Try to load existing config
    data_path = read_saved_data_path(config_file)
    if data_path:
        init_paths(data_path)
        return data_path

    # 2. No usable config: ask through the GUI.
    # Imported here so the rest of the module works without a display.
    from PySide6 import QtWidgets

    app = QtWidgets.QApplication.instance()
    if not app:
        # If this runs before main.py creates the app, we must create a temporary one
        # so the dialogs don't crash the script.
        app = QtWidgets.QApplication(sys.argv)

    selected_dir = QtWidgets.QFileDialog.getExistingDirectory(
        None, "Select Member Data Folder", str(Path.cwd())
    )
    data_path = Path(selected_dir) if selected_dir else Path.cwd()
    if not selected_dir:
        logger.info("No data folder selected, using %s", data_path)

    # 3. Save the selection for next time
    try:
        save_data_path(data_path, config_file)
    except OSError as e:
        QtWidgets.QMessageBox.warning(None, "Warning", f"Failed to save configuration: {e}")

    init_paths(data_path)
    return data_path
