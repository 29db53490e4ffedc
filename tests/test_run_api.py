"""
Tests for the server entry point.
"""

from unittest.mock import patch

import run_api
from api.config import config


def test_main_starts_uvicorn_with_configured_bind():
    with patch("run_api.uvicorn.run") as mock_run:
        run_api.main()

    mock_run.assert_called_once_with(
        "api.main:app",
        host=config.host,
        port=config.port,
        reload=config.debug,
        log_level=config.log_level.lower(),
        access_log=True
    )