from logging.handlers import RotatingFileHandler

from link_crawler.logger import configure, init_logging


def test_log_file_gets_rotating_handler(tmp_path):
    log_file = tmp_path / "crawl.log"
    lg = init_logging(level="DEBUG", log_file=log_file, log_format="%(message)s")
    try:
        assert not lg.propagate
        assert any(isinstance(h, RotatingFileHandler) for h in lg.handlers)
        lg.debug("Level 1: fetching 3 pages")
        for handler in lg.handlers:
            handler.flush()
        assert log_file.read_text(encoding="utf-8") == "Level 1: fetching 3 pages\n"
    finally:
        init_logging()


def test_reconfigure_replaces_and_closes_handlers(tmp_path):
    lg = init_logging(log_file=tmp_path / "first.log")
    old_file_handler = next(h for h in lg.handlers if isinstance(h, RotatingFileHandler))
    try:
        lg = init_logging()
        assert len(lg.handlers) == 1
        assert old_file_handler.stream is None
        lg = configure(replace_handlers=False)
        assert len(lg.handlers) == 2
    finally:
        init_logging()
