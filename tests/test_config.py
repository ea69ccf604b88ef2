"""Tests for precision configuration and logging setup."""

import logging

import numpy as np
import pytest

from plantgeom import PrecisionError, merge_meshes, rectangle, setup_logging
from plantgeom import config
from plantgeom.vectors import as_vertices


class TestPrecision:

    @pytest.mark.parametrize("value", [np.float32, "float32", np.dtype("float32")])
    def test_resolve_single(self, value):
        assert config.resolve_dtype(value) == np.float32

    @pytest.mark.parametrize("value", [np.int32, "float16", "bogus", object])
    def test_resolve_unsupported(self, value):
        with pytest.raises(PrecisionError):
            config.resolve_dtype(value)

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv(config.PRECISION_ENV_VAR, "float32")
        assert config._default_dtype_from_env() == np.float32

    def test_env_invalid_falls_back(self, monkeypatch, caplog):
        monkeypatch.setenv(config.PRECISION_ENV_VAR, "int8")
        with caplog.at_level(logging.WARNING, logger="plantgeom.config"):
            assert config._default_dtype_from_env() == np.float64
        assert config.PRECISION_ENV_VAR in caplog.text

    def test_env_unset(self, monkeypatch):
        monkeypatch.delenv(config.PRECISION_ENV_VAR, raising=False)
        assert config._default_dtype_from_env() == np.float64

    def test_as_vertices_integer_input(self):
        v = as_vertices([(0, 0, 0)])
        assert v.dtype == config.DEFAULT_DTYPE


class TestLogging:

    @pytest.fixture
    def package_logger(self):
        logger = logging.getLogger("plantgeom")
        yield logger
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)
        logger.setLevel(logging.NOTSET)

    def test_setup_logging_idempotent(self, package_logger):
        setup_logging()
        setup_logging()
        assert len(package_logger.handlers) == 1
        assert package_logger.level == logging.INFO

    def test_level_by_name(self, package_logger):
        assert setup_logging("debug") is package_logger
        assert package_logger.level == logging.DEBUG
        assert package_logger.handlers[0].level == logging.DEBUG

    def test_unknown_level_name(self, package_logger):
        with pytest.raises(ValueError):
            setup_logging("chatty")

    def test_log_file(self, package_logger, tmp_path):
        log_file = tmp_path / "plantgeom.log"
        setup_logging(logging.DEBUG, log_file=str(log_file))
        merge_meshes([rectangle(), rectangle()])
        assert "Merged 2 meshes into 4 triangles" in log_file.read_text(encoding="utf-8")
