from __future__ import annotations

import calendar
import typing as tp
from email.utils import formatdate, parsedate_tz

HEADERS_ENCODING = "iso-8859-1"

T = tp.TypeVar("T")


def parse_date(date: str) -> tp.Optional[int]:
    """
    Parse an HTTP-date into a unix epoch.

    Accepts the IMF-fixdate, RFC 850 and asctime forms. Dates carrying a
    numeric zone offset are normalized to UTC, dates without one are taken
    as GMT.

    Returns:
        The epoch in whole seconds, or None if the value is not a date.
    """
    try:
        parsed = parsedate_tz(date)
    except (TypeError, ValueError, IndexError):
        return None
    if parsed is None:
        return None
    offset = parsed[9] or 0
    try:
        return calendar.timegm(parsed[:6]) - offset
    except (OverflowError, ValueError):
        return None


def format_http_date(epoch: int) -> str:
    """
    Format a unix epoch as an HTTP-date.
    Returns date in RFC 1123 format (required by HTTP/1.1).

    Example output: 'Sun, 26 Oct 2025 12:34:56 GMT'
    """
    return formatdate(timeval=epoch, localtime=False, usegmt=True)


def filter_mapping(mapping: tp.Mapping[str, T], keys_to_exclude: tp.Iterable[str]) -> tp.Dict[str, T]:
    """
        Filter out specified keys from a string-keyed mapping using case-insensitive comparison.

        Args:
            mapping: The input mapping with string keys to filter.
            keys_to_exclude: An iterable of string keys to exclude (case-insensitive).

        Returns:
            A new dictionary with the specified keys excluded.

        Example:
    ```python
            original = {'Content-Type': 'text/plain', 'Last-Modified': '...'}
            filtered = filter_mapping(original, ['content-type'])
            # filtered will be {'Last-Modified': '...'}
    ```
    """
    exclude_set = {k.lower() for k in keys_to_exclude}
    return {k: v for k, v in mapping.items() if k.lower() not in exclude_set}
