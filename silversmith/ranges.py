"""
SKU range expansion.

Print lists and order forms accept compact ranges:

    expand_range("DA050-DA063")    # DA050, DA051, ... DA063
    expand_range("DA050X-DA052X")  # DA050X, DA051X, DA052X
    expand_range("STX-505")        # ["STX-505"] (not a range)
    expand_range("ST\\-1-ST\\-3")    # ST-1, ST-2, ST-3 (escaped hyphens)
"""

import re

from silversmith.exceptions import SilversmithError

DEFAULT_RANGE_LIMIT = 500

MASTER_LIKE = re.compile(r"^(?P<prefix>[A-Z][A-Z-]*)(?P<number>[0-9]+)(?P<suffix>[A-Z]*)$")

# First "-" that is not escaped with a backslash
RANGE_SEPARATOR = re.compile(r"(?<!\\)-")


def _unescape(text: str) -> str:
    return text.replace("\\-", "-")


def expand_range(token: str, limit: int = DEFAULT_RANGE_LIMIT) -> list[str]:
    """
    Expand a range token into the SKUs it denotes.

    A token is a range only when both sides of the first unescaped hyphen
    look like masters (letters, digits, optional letter suffix). Anything
    else is returned as a single plain SKU.

    Raises:
        SilversmithError: MISMATCHED_RANGE_PREFIX, INVALID_RANGE_ORDER,
            RANGE_TOO_LARGE
    """
    token = (token or "").strip().upper()
    if not token:
        return []

    parts = RANGE_SEPARATOR.split(token, maxsplit=1)
    if len(parts) != 2:
        return [_unescape(token)]

    start_match = MASTER_LIKE.match(_unescape(parts[0]))
    end_match = MASTER_LIKE.match(_unescape(parts[1]))
    if not start_match or not end_match:
        return [_unescape(token)]

    prefix = start_match["prefix"]
    suffix = end_match["suffix"]

    if prefix != end_match["prefix"]:
        raise SilversmithError(
            "MISMATCHED_RANGE_PREFIX",
            token=token,
            start=prefix,
            end=end_match["prefix"],
        )
    if start_match["suffix"] and start_match["suffix"] != suffix:
        raise SilversmithError(
            "MISMATCHED_RANGE_PREFIX",
            token=token,
            start=start_match["suffix"],
            end=suffix,
        )

    width = len(start_match["number"])
    first = int(start_match["number"])
    last = int(end_match["number"])

    if last < first:
        raise SilversmithError("INVALID_RANGE_ORDER", token=token, start=first, end=last)

    count = last - first + 1
    if count > limit:
        raise SilversmithError("RANGE_TOO_LARGE", token=token, count=count, limit=limit)

    return [f"{prefix}{number:0{width}d}{suffix}" for number in range(first, last + 1)]
