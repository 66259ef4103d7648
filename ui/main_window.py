import logging
from typing import List, Optional

from PySide6 import QtWidgets

from services.file_manager import load_or_setup_paths
from services.member_service import MemberRegistry
from services.storage_service import load_members
from ui.dashboards.member_dashboard import MemberDashboard

logger = logging.getLogger(__name__)


class GymApp(QtWidgets.QApplication):
    """
    The main Application class that manages the application lifecycle.
    1. Sets up the data folder.
    2. Loads both member files into a fresh registry.
    3. Shows the member dashboard.
    """
    def __init__(self, args: List[str]):
        super().__init__(args)
        self.registry = MemberRegistry()
        self.main_window: Optional[QtWidgets.QMainWindow] = None

    def start(self) -> None:
        """Initializes the environment and shows the first screen."""
        # 1. Setup File System
        data_path = load_or_setup_paths()
        logger.info("Using data folder %s", data_path)

        # 2. Load whatever was saved last time
        summary = load_members(self.registry)
        logger.info("Startup load: %d members", summary.total)

        # 3. Show the dashboard
        self.main_window = MemberDashboard(self.registry)
        self.main_window.show()

        if summary.failed:
            QtWidgets.QMessageBox.warning(self.main_window, "Load Error", summary.describe("loaded"))
