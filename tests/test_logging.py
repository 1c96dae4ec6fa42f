from __future__ import annotations

import sys

from loguru import logger

from infrastructure.logging import find_latest_log_file, init_logging


def test_init_logging_writes_daily_file(tmp_path):
    log_dir = init_logging(str(tmp_path / "logs"))
    try:
        logger.info("hello {}", "movies")
        logger.complete()
        latest = find_latest_log_file(str(log_dir))
        assert latest is not None
        assert latest.name.startswith("app_")
    finally:
        logger.remove()
        logger.add(sys.stderr)


def test_find_latest_log_file_missing_dir(tmp_path):
    assert find_latest_log_file(str(tmp_path / "absent")) is None
