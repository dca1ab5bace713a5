"""Unit tests for the configuration apply pipeline."""

import io
from unittest.mock import Mock, patch

import pytest

from wheatconf.exceptions import (
    ConfigConsistencyError,
    ConfigFileError,
    ConfigLoadError,
    ErrorCode,
)
from wheatconf.config.loader import (
    apply_config,
    fatal_config_error,
    load_config,
    load_config_file,
    read_config_text,
)
from wheatconf.config.values import BooleanValue, IntegerValue, OwnedList


class TestApplyConfig:
    """Test line-by-line application."""

    def test_scenario_worker_number(self, registry):
        """Test worker-number 5 commits 5."""
        apply_config("worker-number 5", registry)

        assert registry.get("worker-number").value == IntegerValue(5)

    def test_scenario_worker_number_over_ceiling(self, registry):
        """Test worker-number 5000 is a fatal validation error."""
        with pytest.raises(ConfigLoadError) as exc_info:
            apply_config("worker-number 5000", registry)

        error = exc_info.value
        assert error.code == ErrorCode.VALIDATE_FAILED
        assert error.reason == "Validate Failed"
        assert error.line_number == 1

    def test_scenario_daemon(self, registry):
        """Test daemon on commits true and daemon maybe fails."""
        apply_config("daemon on", registry)
        assert registry.get("daemon").value == BooleanValue(True)

        with pytest.raises(ConfigLoadError):
            apply_config("daemon maybe", registry)

    def test_scenario_list_block(self, list_registry):
        """Test a list block commits items and the next line is applied normally."""
        applied = apply_config(
            "mylist\n- alpha\n- beta\nother-setting value\n", list_registry
        )

        assert list_registry.get("mylist").value == OwnedList(["alpha", "beta"])
        assert list_registry.get("other-setting").value.text == "value"
        assert applied == 2

    def test_list_block_terminating_line_processed_once(self, list_registry):
        """Test the line ending a block is neither skipped nor applied twice."""
        with pytest.raises(ConfigLoadError) as exc_info:
            apply_config("mylist\n- a\nbogus 1\n", list_registry)

        assert exc_info.value.line_number == 3
        assert exc_info.value.code == ErrorCode.UNKNOWN_NAME
        assert list_registry.get("mylist").value.items == ["a"]

    def test_list_entry_with_inline_value_fails(self, list_registry):
        """Test a list entry must use the block form."""
        with pytest.raises(ConfigLoadError) as exc_info:
            apply_config("mylist alpha", list_registry)

        assert exc_info.value.code == ErrorCode.VALIDATE_FAILED

    def test_scenario_logfile_null(self, registry):
        """Test logfile NULL unsets and releases the previous string."""
        apply_config("logfile /var/log/wheat.log", registry)
        previous = registry.get("logfile").value

        apply_config("logfile NULL", registry)

        assert previous.released
        assert registry.get("logfile").value.text is None

    def test_comments_and_blank_lines_skipped(self, registry):
        """Test comments, blanks and surrounding whitespace."""
        applied = apply_config(
            "# header\n\n   \n\tport 9000\r\n#daemon on\n", registry
        )

        assert applied == 1
        assert registry.get("port").value == IntegerValue(9000)
        assert registry.get("daemon").value == BooleanValue(False)

    def test_later_lines_win(self, registry):
        """Test the last occurrence of a name is kept."""
        apply_config("port 1\nport 2\n", registry)

        assert registry.get("port").value == IntegerValue(2)

    def test_prefix_name_resolves(self, registry):
        """Test an abbreviated setting name is accepted."""
        apply_config("time 60", registry)

        assert registry.get("timeout-seconds").value == IntegerValue(60)

    def test_enum_prefix_value(self, registry):
        """Test enum values are matched by option name prefix."""
        apply_config("logfile-level warning\nworker-type async", registry)

        assert registry.get("logfile-level").value.option.name == "WARNING"
        assert registry.get("worker-type").value.option.name == "AsyncWorker"

    def test_enum_value_with_non_ascii_letter_fails(self, registry):
        """Test a KELVIN SIGN in place of 'k' does not select AsyncWorker."""
        with pytest.raises(ConfigLoadError) as exc_info:
            apply_config("worker-type AsyncWor\u212Aer", registry)

        assert exc_info.value.code == ErrorCode.VALIDATE_FAILED
        assert registry.get("worker-type").value.option.name == "SyncWorker"

    def test_unknown_name(self, registry):
        """Test an unknown name is fatal with its line."""
        with pytest.raises(ConfigLoadError) as exc_info:
            apply_config("port 80\n  listen 80  \n", registry)

        error = exc_info.value
        assert error.code == ErrorCode.UNKNOWN_NAME
        assert error.line_number == 2
        assert error.raw_line == "  listen 80  "

    def test_missing_value_is_arity_error(self, registry):
        """Test a scalar setting without a value fails arity."""
        with pytest.raises(ConfigLoadError) as exc_info:
            apply_config("port", registry)

        assert exc_info.value.code == ErrorCode.INCORRECT_ARGS
        assert exc_info.value.reason == "Incorrect args"

    def test_no_rollback_on_failure(self, registry):
        """Test lines before the failure keep their values."""
        with pytest.raises(ConfigLoadError):
            apply_config("port 9000\ndaemon on\nworker-number x\nmbuf-size 1\n", registry)

        assert registry.get("port").value == IntegerValue(9000)
        assert registry.get("daemon").value == BooleanValue(True)
        assert registry.get("mbuf-size").value == IntegerValue(16384)

    def test_failure_keeps_cause(self, registry):
        """Test the wrapped error keeps the validator detail."""
        with pytest.raises(ConfigLoadError) as exc_info:
            apply_config("worker-number abc", registry)

        assert exc_info.value.cause.data["field"] == "worker-number"
        assert exc_info.value.data["line"] == 1


class TestLoadConfig:
    """Test flattening and the structural check."""

    def test_defaults(self, registry):
        """Test loading empty text yields compiled defaults."""
        settings = load_config("", registry)

        assert settings.port == 10828
        assert settings.worker_type == "SyncWorker"
        assert settings.verbose == 2
        assert settings.logfile is None

    def test_scenario_refresh_not_below_timeout(self, registry):
        """Test stat-refresh-time 400 with timeout-seconds 300 fails."""
        with pytest.raises(ConfigConsistencyError) as exc_info:
            load_config("stat-refresh-time 400\ntimeout-seconds 300\n", registry)

        assert exc_info.value.code == ErrorCode.INCONSISTENT

    def test_zero_port_rejected(self, registry):
        """Test the service port must be nonzero."""
        with pytest.raises(ConfigConsistencyError, match="nonzero"):
            load_config("port 0", registry)


class TestLoadConfigFile:
    """Test reading files and overrides."""

    def test_file_and_overrides(self, registry, config_file):
        """Test overrides are applied after the file."""
        settings = load_config_file(
            str(config_file), "port 9100\ndaemon on", registry, test=True
        )

        assert settings.port == 9100
        assert settings.daemon is True
        assert settings.bind_addr == "0.0.0.0"
        assert settings.worker_type == "AsyncWorker"
        assert settings.verbose == 0

    def test_overrides_only(self, registry):
        """Test loading with no file."""
        settings = load_config_file("", "worker-number 8", registry)

        assert settings.worker_number == 8

    def test_missing_file(self, registry, tmp_path):
        """Test an unreadable file raises ConfigFileError."""
        with pytest.raises(ConfigFileError) as exc_info:
            read_config_text(str(tmp_path / "missing.conf"))

        assert exc_info.value.code == ErrorCode.FILE_ERROR

    def test_override_line_numbers_follow_file(self, registry, tmp_path):
        """Test override lines are numbered after the file lines."""
        path = tmp_path / "a.conf"
        path.write_text("port 80\n", encoding="utf-8")

        with pytest.raises(ConfigLoadError) as exc_info:
            load_config_file(str(path), "daemon maybe", registry)

        assert exc_info.value.line_number == 3

    def test_default_registry_when_omitted(self, config_file):
        """Test filename and overrides alone are enough to load."""
        settings = load_config_file(str(config_file), None)

        assert settings.port == 9000
        assert settings.worker_number == 4

    def test_on_loaded_runs_before_dump(self, registry, config_file):
        """Test the loaded hook sees the settings before the dump is logged."""
        calls = []

        def on_loaded(settings):
            calls.append(("loaded", settings.verbose))

        with patch(
            "wheatconf.config.loader.print_server_config",
            side_effect=lambda reg, test: calls.append(("dump", test)),
        ):
            load_config_file(str(config_file), None, registry, on_loaded=on_loaded)

        assert calls == [("loaded", 0), ("dump", False)]

    def test_on_loaded_not_called_on_failure(self, registry):
        """Test the hook only runs for a valid configuration."""
        on_loaded = Mock()

        with pytest.raises(ConfigLoadError):
            load_config_file("", "daemon maybe", registry, on_loaded=on_loaded)

        on_loaded.assert_not_called()


class TestFatalConfigError:
    """Test the process-level failure surface."""

    def test_writes_diagnostic_and_exits(self, registry):
        """Test the diagnostic banner and exit status."""
        stream = io.StringIO()
        try:
            apply_config("port 80\nworker-number 5000\n", registry)
        except ConfigLoadError as error:
            with pytest.raises(SystemExit) as exc_info:
                fatal_config_error(error, stream)

        assert exc_info.value.code == 1
        assert stream.getvalue() == (
            "\n*** FATAL CONFIG FILE ERROR ***\n"
            "Reading the configuration file, at line 2\n"
            ">>> 'worker-number 5000'\n"
            "Reason: Validate Failed\n"
        )

    def test_defaults_to_stderr(self, capsys):
        """Test diagnostics go to standard error."""
        with pytest.raises(SystemExit):
            fatal_config_error(ConfigConsistencyError("port and stat-port must be nonzero"))

        captured = capsys.readouterr()
        assert "*** FATAL CONFIG FILE ERROR ***" in captured.err
        assert "Reason: Inconsistent configuration" in captured.err
