"""Worker name parser for pool logins.

A mining client submits a composite worker name when it authorizes:

- ``<payout-id>``
- ``<payout-id>.<suffix>``
- ``<payout-id>.<secondary-id>@<domain>[.<suffix>]``

The payout id is normally a BTC address and the secondary id a lightning
identifier. Only ``.`` and ``@`` are meaningful; every scan takes the first
occurrence and leaves later delimiters inside the field. Nothing is validated
here: callers truncate overlong names beforehand and decide what to do with
odd results such as an empty domain.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

FIELD_DELIMITER = "."
DOMAIN_DELIMITER = "@"


@dataclass(frozen=True)
class ParsedWorkerName:
    primary_id: str
    secondary_id: str | None = None
    domain: str | None = None
    suffix: str | None = None


def split_once(text: str, delimiter: str) -> tuple[str, str | None]:
    """Split at the first delimiter; the remainder is None if there is none."""
    idx = text.find(delimiter)
    if idx < 0:
        return text, None
    return text[:idx], text[idx + len(delimiter) :]


def _parse_lightning(workername: str) -> ParsedWorkerName:
    # Starts over from the full name rather than reusing the first split.
    primary_id, remainder = split_once(workername, FIELD_DELIMITER)
    secondary_id = domain = suffix = None
    if remainder is not None:
        secondary_id, remainder = split_once(remainder, DOMAIN_DELIMITER)
        if remainder is not None:
            # "" when the name ends at "@" or "@" is followed by ".".
            domain, suffix = split_once(remainder, FIELD_DELIMITER)
    return ParsedWorkerName(primary_id, secondary_id, domain, suffix)


def parse_workername(workername: str) -> ParsedWorkerName:
    """Split a worker name into payout id, lightning id, domain and suffix."""
    head, rest = split_once(workername, FIELD_DELIMITER)
    if rest is None:
        parsed = ParsedWorkerName(head)
    elif DOMAIN_DELIMITER in rest:
        parsed = _parse_lightning(workername)
    else:
        parsed = ParsedWorkerName(head, suffix=rest)

    if not parsed.primary_id:
        return replace(parsed, primary_id=workername)
    return parsed
