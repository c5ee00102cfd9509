import logging

import pytest

from fluidbrush import config
from fluidbrush.logging_config import parse_level, setup_logging
from fluidbrush.main import build_parser, resolve_data_path


def test_parser_defaults():
    args = build_parser().parse_args([])
    assert args.path is None
    assert args.log_level == logging.INFO
    assert args.log_file is None


def test_parser_with_path_and_level():
    args = build_parser().parse_args(["data.csv", "--log-level", "debug"])
    assert args.path == "data.csv"
    assert args.log_level == logging.DEBUG


def test_parser_rejects_unknown_level():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["--log-level", "loud"])


def test_parse_level():
    assert parse_level("warning") == logging.WARNING
    assert parse_level(15) == 15
    with pytest.raises(ValueError):
        parse_level("verbose")


def test_explicit_path_wins(tmp_path):
    assert resolve_data_path(str(tmp_path / "x.csv")) == str(tmp_path / "x.csv")


def test_default_path_only_when_present(monkeypatch, tmp_path):
    monkeypatch.setattr(config, "DEFAULT_DATA_PATH", str(tmp_path / "missing.csv"))
    assert resolve_data_path(None) is None

    sample = tmp_path / "sample.csv"
    sample.write_text("x\n", encoding="utf-8")
    monkeypatch.setattr(config, "DEFAULT_DATA_PATH", str(sample))
    assert resolve_data_path(None) == str(sample)


def test_setup_logging_writes_file(tmp_path):
    log_file = tmp_path / "app.log"
    logger = setup_logging(logging.DEBUG, str(log_file))
    try:
        logging.getLogger("fluidbrush.model").debug("hello from the model")
        for handler in logger.handlers:
            handler.flush()
        assert "hello from the model" in log_file.read_text(encoding="utf-8")
        # running setup twice does not stack handlers
        setup_logging(logging.DEBUG, str(log_file))
        assert len(logger.handlers) == 2
    finally:
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)
        logger.setLevel(logging.NOTSET)
