"""Tests for the extended attribute metadata store."""

import plistlib
from pathlib import Path
from unittest.mock import patch

from edmgutil.backends.xattr_store import WHERE_FROMS_ATTR, XattrMetadataStore, decode_where_froms


def test_decode_binary_plist():
    raw = plistlib.dumps(["https://sentry.io/a", ""], fmt=plistlib.FMT_BINARY)
    assert decode_where_froms(raw) == ["https://sentry.io/a", ""]


def test_decode_garbage():
    assert decode_where_froms(b"garbage") is None


def test_decode_non_list():
    assert decode_where_froms(plistlib.dumps({"a": 1})) is None


@patch("edmgutil.backends.xattr_store.xattr.getxattr")
def test_origin_urls_reads_where_froms(mock_getxattr):
    mock_getxattr.return_value = plistlib.dumps(["https://sentry.io/a"], fmt=plistlib.FMT_BINARY)

    assert XattrMetadataStore().origin_urls(Path("/tmp/file")) == ["https://sentry.io/a"]
    mock_getxattr.assert_called_once_with("/tmp/file", WHERE_FROMS_ATTR)


@patch("edmgutil.backends.xattr_store.xattr.getxattr", side_effect=OSError(93, "Attribute not found"))
def test_origin_urls_missing_attribute(mock_getxattr):
    assert XattrMetadataStore().origin_urls(Path("/tmp/file")) is None
