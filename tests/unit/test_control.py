"""Unit tests for the runtime configuration query."""

from unittest.mock import Mock

from wheatconf.config.loader import apply_config
from wheatconf.control import (
    NO_SUCH_CONFIGURATION,
    ConfigQuery,
    config_command,
    describe,
)


class TestDescribe:
    """Test single setting queries."""

    def test_known_setting(self, registry):
        """Test a known name replies with its formatted line."""
        apply_config("worker-number 5", registry)

        assert describe(registry, ConfigQuery(name="worker-number")) == "worker-number: 5"

    def test_prefix_query(self, registry):
        """Test a prefix resolves like the loader does."""
        assert describe(registry, ConfigQuery(name="time")) == "timeout-seconds: 30"

    def test_unknown_setting(self, registry):
        """Test an unknown name replies with the fixed message."""
        assert describe(registry, ConfigQuery(name="nope")) == NO_SUCH_CONFIGURATION


class TestConfigCommand:
    """Test the client command handler."""

    def test_replies_through_channel(self, registry):
        """Test the reply is sent to the client channel."""
        channel = Mock()

        config_command(registry, ["config", "daemon"], channel)

        channel.reply.assert_called_once_with("daemon: 0")

    def test_missing_name(self, registry):
        """Test a command without a name finds nothing."""
        channel = Mock()

        config_command(registry, ["config"], channel)

        channel.reply.assert_called_once_with(NO_SUCH_CONFIGURATION)

    def test_query_from_argv(self):
        """Test building the request from command arguments."""
        assert ConfigQuery.from_argv(["config", "port"]).name == "port"
