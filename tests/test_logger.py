# File: tests/test_logger.py
import logging
from logging.handlers import RotatingFileHandler

from web_parser.logger import configure


def test_configure_replaces_handlers_and_writes_file(tmp_path):
    log_file = tmp_path / "logs" / "parser.log"
    try:
        lg = configure(level="DEBUG", log_file=log_file)
        assert lg is logging.getLogger("WebParser")
        assert len(lg.handlers) == 2
        assert any(isinstance(h, RotatingFileHandler) for h in lg.handlers)

        lg.debug("crawl started")
        for handler in lg.handlers:
            handler.flush()
        assert "crawl started" in log_file.read_text(encoding="utf-8")

        lg = configure(level="INFO")
        assert len(lg.handlers) == 1
        assert not lg.propagate
    finally:
        configure(level="INFO")
