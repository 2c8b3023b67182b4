"""Unit tests for the logging setup."""

import logging

import pytest
from jarpack.utils.logging import setup_logging
from rich.logging import RichHandler


def _rich_handlers() -> list[logging.Handler]:
    return [h for h in logging.getLogger().handlers if isinstance(h, RichHandler)]


class TestSetupLogging:
    """Tests for setup_logging function."""

    @pytest.mark.parametrize(
        ("verbose", "quiet", "level"),
        [
            (False, False, logging.INFO),
            (True, False, logging.DEBUG),
            (False, True, logging.WARNING),
            (True, True, logging.DEBUG),
        ],
    )
    def test_levels(self, verbose: bool, quiet: bool, level: int) -> None:
        """Verbose wins over quiet, and the default is INFO."""
        setup_logging(verbose=verbose, quiet=quiet)

        assert logging.getLogger().level == level
        (handler,) = _rich_handlers()
        assert handler.level == level

    def test_replaces_handler(self) -> None:
        """Calling setup_logging twice installs a single handler."""
        setup_logging()
        setup_logging(verbose=True)

        assert len(_rich_handlers()) == 1
