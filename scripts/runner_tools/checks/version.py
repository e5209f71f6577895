"""Dotted numeric version parsing and comparison."""

import re

VERSION_PATTERN = re.compile(r"^(\d+)\.(\d+)(?:\.(\d+))?")


def parse_version(text: str | None) -> tuple[int, ...] | None:
    """
    Parse the leading major.minor(.patch) of a version string.

    Anything after the numeric prefix (e.g. "-preview.1") is ignored.

    Args:
        text: Version string such as "8.0.100"

    Returns:
        Tuple of integers, or None if the text has no digits.digits prefix
    """
    if not text:
        return None
    match = VERSION_PATTERN.match(text.strip())
    if match is None:
        return None
    return tuple(int(part) for part in match.groups() if part is not None)


def version_at_least(installed: str | None, minimum: str | None) -> bool:
    """Check installed >= minimum numerically. Malformed input is False."""
    have = parse_version(installed)
    want = parse_version(minimum)
    if have is None or want is None:
        return False

    width = max(len(have), len(want))
    have = have + (0,) * (width - len(have))
    want = want + (0,) * (width - len(want))
    return have >= want
