"""Entry point for trip-tunes."""

import locale
import logging
import os
import sys
import traceback
from pathlib import Path

DB_PATH_ENV = "TRIP_TUNES_DB"


def configure_collation() -> bool:
    """Sort text by the user's locale rather than by code point."""
    try:
        locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error as exc:
        logging.getLogger("trip_tunes").warning(
            "System collation locale unavailable (%s); names sort by code point", exc
        )
        return False
    return True


def _data_dir() -> Path:
    path = Path.home() / ".trip_tunes"
    path.mkdir(parents=True, exist_ok=True)
    return path


def main():
    """Launch the application."""
    # Set up file logging to capture crashes
    data_dir = _data_dir()
    log_path = data_dir / "trip_tunes.log"
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        handlers=[
            logging.FileHandler(str(log_path), mode="w", encoding="utf-8"),
            logging.StreamHandler(sys.stderr),
        ],
    )
    logger = logging.getLogger("trip_tunes")
    logger.info("Starting Trip Tunes...")
    logger.info("Log file: %s", log_path)
    configure_collation()

    db_path = os.environ.get(DB_PATH_ENV) or str(data_dir / "trip_tunes.db")
    logger.info("Database: %s", db_path)

    try:
        from PyQt6.QtWidgets import QApplication

        from trip_tunes.ui.app import MainWindow

        app = QApplication(sys.argv)
        app.setApplicationName("Trip Tunes")
        app.setStyle("Fusion")

        window = MainWindow(db_path)
        window.show()

        sys.exit(app.exec())
    except Exception:
        logger.critical("Fatal error:\n%s", traceback.format_exc())
        # Also write to a crash file in case logging failed
        crash_path = data_dir / "crash.log"
        crash_path.write_text(traceback.format_exc(), encoding="utf-8")
        raise


if __name__ == "__main__":
    main()
