"""Run the auto clock-out sweep once, e.g. from cron every few minutes."""
from __future__ import annotations

import importlib
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.absensi.absensi.container import build_container

logger = logging.getLogger("auto_clock_out")


def main() -> int:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    logging.basicConfig(level=getattr(settings, "LOG_LEVEL", "INFO"))

    container = build_container(
        db_config=dict(settings.DB_CONFIG),
        local_timezone=getattr(settings, "LOCAL_TIMEZONE", "Asia/Jakarta"),
    )
    result = container.sweeper.sweep()
    logger.info("%s", result.message)
    return 1 if result.failed_ids else 0


if __name__ == "__main__":
    sys.exit(main())
