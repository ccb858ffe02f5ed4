"""Tests for BackendRegistry."""

import logging
from unittest.mock import patch

import pytest

from edmgutil.backends.base import BackendStatus
from edmgutil.backends.hdiutil import HdiutilBackend
from edmgutil.backends.registry import BackendRegistry
from edmgutil.backends.sevenzip import SevenZipBackend
from edmgutil.backends.xattr_store import XattrMetadataStore
from edmgutil.errors import ToolNotFoundError
from edmgutil.models.config import EdmgConfig


def test_from_config_builds_macos_backends():
    registry = BackendRegistry.from_config(EdmgConfig())

    assert isinstance(registry.disk_images, HdiutilBackend)
    assert isinstance(registry.archives, SevenZipBackend)
    assert isinstance(registry.metadata, XattrMetadataStore)


@patch("edmgutil.backends.registry.which")
def test_status(mock_which):
    mock_which.side_effect = lambda tool: "/usr/bin/hdiutil" if tool == "hdiutil" else None

    status = BackendRegistry().status("hdiutil", "7z")

    assert status == {"hdiutil": BackendStatus.AVAILABLE, "7z": BackendStatus.MISSING}


@patch("edmgutil.backends.registry.which", return_value=None)
def test_require_missing_tool(mock_which):
    with pytest.raises(ToolNotFoundError, match="7z is not available"):
        BackendRegistry().require("7z")


@patch("edmgutil.backends.registry.which", return_value="/usr/bin/tool")
def test_require_present_tools(mock_which):
    BackendRegistry().require("hdiutil", "7z")
    assert mock_which.call_count == 2


@patch("edmgutil.backends.registry.which", return_value=None)
def test_require_missing_tool_is_not_logged_as_error(mock_which, caplog):
    """The CLI reports the missing tool; the registry only logs at debug level."""
    with caplog.at_level(logging.DEBUG, logger="edmgutil.backends.registry"):
        with pytest.raises(ToolNotFoundError):
            BackendRegistry().require("hdiutil")

    assert caplog.records
    assert all(record.levelno < logging.WARNING for record in caplog.records)
