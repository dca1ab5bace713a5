"""Shared test fixtures and configuration."""

import logging

import pytest
import structlog

from wheatconf.config.registry import ConfigEntry, ConfigRegistry, default_registry
from wheatconf.config.values import (
    ConstantList,
    ConstantString,
    EnumOption,
    EnumTable,
    EnumValue,
    IntegerValue,
    ValueKind,
)
from wheatconf.observability.logging import HANDLER_NAME


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop logging handlers installed by configure_logging after each test."""
    root = logging.getLogger()
    level = root.level
    yield
    structlog.reset_defaults()
    root.setLevel(level)
    for handler in list(root.handlers):
        if handler.get_name() == HANDLER_NAME:
            root.removeHandler(handler)
            handler.close()


@pytest.fixture
def registry():
    """Create a registry filled with the compiled-in settings."""
    return default_registry()


@pytest.fixture
def list_registry():
    """Create a small registry with a list entry next to scalar entries."""
    return ConfigRegistry(
        [
            ConfigEntry("mylist", ValueKind.LIST, ConstantList(("seed",))),
            ConfigEntry("other-setting", ValueKind.STRING, ConstantString(None)),
            ConfigEntry("count", ValueKind.INTEGER, IntegerValue(1), ceiling=10),
        ]
    )


@pytest.fixture
def color_table():
    """Create an enum table whose first option is a prefix of a later one."""
    return EnumTable(
        "color",
        (
            EnumOption(0, "RED"),
            EnumOption(1, "REDDISH"),
            EnumOption(2, "BLUE"),
        ),
    )


@pytest.fixture
def color_entry(color_table):
    """Create an enum entry backed by the color table."""
    return ConfigEntry(
        "color", ValueKind.ENUM, EnumValue(color_table[2]), enum_table=color_table
    )


@pytest.fixture
def config_file(tmp_path):
    """Write a realistic configuration file and return its path."""
    path = tmp_path / "wheatserver.conf"
    path.write_text(
        "# wheatserver configuration\n"
        "\n"
        "protocol Http\n"
        "bind-addr 0.0.0.0\n"
        "port 9000\n"
        "worker-number 4\n"
        "worker-type AsyncWorker\n"
        "logfile-level debug\n"
        "daemon off\n"
        "stat-refresh-time 5\n"
        "timeout-seconds 60\n",
        encoding="utf-8",
    )
    return path
