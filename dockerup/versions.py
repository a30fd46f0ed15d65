"""Version string helpers."""

import re

VERSION_PATTERNS = [
    r"v?(\d+\.\d+\.\d+(?:\.\d+)?)",  # v27.3.1 or 27.3.1
    r"v?(\d+\.\d+)",  # v2.29
]


def extract_version_number(version_str: str) -> str:
    """Extract the version number from a tool's version banner.

    >>> extract_version_number("Docker version 27.3.1, build ce12230")
    '27.3.1'
    >>> extract_version_number("v2.29.7")
    '2.29.7'
    """
    if not version_str:
        return ""

    for pattern in VERSION_PATTERNS:
        match = re.search(pattern, version_str)
        if match:
            return match.group(1)

    return ""
