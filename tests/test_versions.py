"""Tests for version utilities."""

import pytest

from dockerup.versions import extract_version_number


@pytest.mark.parametrize(
    "banner,expected",
    [
        ("Docker version 27.3.1, build ce12230", "27.3.1"),
        ("Docker Compose version v2.29.7", "2.29.7"),
        ("Docker version 24.0.7.1", "24.0.7.1"),
        ("version 2.29", "2.29"),
    ],
)
def test_extracts_from_banner(banner, expected):
    assert extract_version_number(banner) == expected


@pytest.mark.parametrize("banner", ["", "command not found"])
def test_no_version(banner):
    assert extract_version_number(banner) == ""
