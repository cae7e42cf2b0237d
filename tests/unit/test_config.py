"""
Configuration, paths and error formatting tests
"""

import os
from unittest.mock import MagicMock

import pytest
import structlog
from pydantic import ValidationError

from bundlekit.config import BundleSettings
from bundlekit.errors import BundleKitError, ConfigurationError, ExportNotFoundError, ImportNotFoundError
from bundlekit.logging import ProgressLogger, get_logger
from bundlekit.paths import get_cache_output, get_output, hash_id, is_file_url, is_url, local_path

# ============================================================
# Settings
# ============================================================


class TestSettings:
    def test_defaults(self, project):
        settings = BundleSettings()

        assert settings.out_dir == "dist"
        assert settings.deps_path == os.path.join("dist", "deps")
        assert settings.cache_path == os.path.join("dist", ".cache")
        assert settings.remote_path == os.path.join("dist", ".remote")
        assert settings.reload is False
        assert settings.optimize is False

    def test_env_prefix(self, project, monkeypatch):
        monkeypatch.setenv("BUNDLEKIT_OUT_DIR", "build")
        monkeypatch.setenv("BUNDLEKIT_RELOAD", "true")

        settings = BundleSettings()

        assert settings.out_dir == "build"
        assert settings.reload is True
        assert settings.deps_path == os.path.join("build", "deps")

    def test_invalid_timeout(self, project):
        with pytest.raises(ValidationError):
            BundleSettings(http_timeout=0)

    def test_invalid_log_format(self, project):
        with pytest.raises(ValidationError):
            BundleSettings(log_format="xml")


# ============================================================
# Paths
# ============================================================


class TestPaths:
    @pytest.mark.parametrize(
        "input,expected",
        [
            ("https://cdn.example.com/a.js", True),
            ("http://localhost/a.js", True),
            ("HTTPS://EXAMPLE.COM/A.JS", True),
            ("file:///tmp/a.js", False),
            ("./a.js", False),
            ("src/https.js", False),
        ],
    )
    def test_is_url(self, input, expected):
        assert is_url(input) is expected

    def test_file_url_is_local(self):
        assert is_file_url("file:///tmp/a.js")
        assert not is_file_url("https://cdn.example.com/a.js")
        assert local_path("file:///tmp/my%20lib/a.js") == "/tmp/my lib/a.js"
        assert local_path("src/a.js") == "src/a.js"

    def test_hash_is_deterministic(self):
        assert hash_id("src/a.js") == hash_id("src/a.js")
        assert hash_id("src/a.js") != hash_id("src/b.js")
        assert len(hash_id("src/a.js")) == 64

    def test_get_output_memoizes(self):
        file_map = {}

        output = get_output("src/a.js", file_map, "dist/deps")

        assert output == os.path.join("dist/deps", hash_id("src/a.js")) + ".js"
        assert file_map == {"src/a.js": output}

    def test_get_output_keeps_existing_mapping(self):
        file_map = {"src/a.js": "legacy/a.js"}

        assert get_output("src/a.js", file_map, "dist/deps") == "legacy/a.js"

    def test_cache_output_has_no_extension(self):
        assert get_cache_output("src/a.js", "dist/.cache") == os.path.join("dist/.cache", hash_id("src/a.js"))


# ============================================================
# Errors
# ============================================================


class TestErrors:
    def test_import_not_found(self):
        error = ImportNotFoundError("src/a.js", "src/b.js")

        assert isinstance(error, BundleKitError)
        assert str(error) == "[IMPORT_NOT_FOUND] file 'src/a.js' import not found: 'src/b.js'"
        assert error.context == {"input": "src/a.js", "dependency": "src/b.js"}

    def test_export_not_found(self):
        error = ExportNotFoundError("src/a.js", "src/b.js")

        assert error.message == "file 'src/a.js' export not found: 'src/b.js'"
        assert error.code == "EXPORT_NOT_FOUND"

    def test_configuration_error_repr(self):
        error = ConfigurationError("bad", path="x.json")

        assert repr(error) == "ConfigurationError(code='CONFIGURATION_ERROR', message='bad', path='x.json')"


# ============================================================
# Progress logging
# ============================================================


class TestProgressLogger:
    def test_quiet_suppresses_events(self):
        logger = MagicMock()

        ProgressLogger(logger, quiet=True).event("bundle", input="a.js")

        logger.info.assert_not_called()

    def test_events_logged_at_info(self):
        logger = MagicMock()

        ProgressLogger(logger).event("check", input="b.js")

        logger.info.assert_called_once_with("check", input="b.js")


@pytest.fixture
def unconfigured_structlog():
    saved = structlog.get_config()
    structlog.reset_defaults()
    yield
    structlog.configure(**saved)


class TestLoggingDefaults:
    def test_debug_filtered_without_setup(self, unconfigured_structlog, capsys):
        logger = get_logger("bundlekit.tests")

        logger.debug("hidden_event")
        logger.info("shown_event")

        out = capsys.readouterr().out
        assert "hidden_event" not in out
        assert "shown_event" in out
        assert structlog.is_configured()

    def test_host_configuration_kept(self, unconfigured_structlog):
        wrapper = structlog.make_filtering_bound_logger(0)
        structlog.configure(wrapper_class=wrapper)

        get_logger("bundlekit.tests")

        assert structlog.get_config()["wrapper_class"] is wrapper
