"""FL Backup Cleaner - keeps only the latest FL Studio autosave per project.

Run: python main.py
"""

import sys
from pathlib import Path

# Ensure package is importable when running from project root
sys.path.insert(0, str(Path(__file__).parent))

from flbackupcleaner.gui.app import FlBackupCleanerApp
from flbackupcleaner.utils.logging_setup import configure_logging


def main():
    configure_logging()
    app = FlBackupCleanerApp()
    app.run()


if __name__ == "__main__":
    main()
