"""Country name to flag emoji resolution.

Country names coming back from the geocoder are free text ("United States",
"Federal Republic of Germany", "france") and rarely line up exactly with the
names in the flag reference table.  The resolver bridges the gap with three
case-insensitive passes over the table, stopping at the first pass that
finds anything:

1. exact    -- the table name equals the input
2. forward  -- the table name contains the input ("United States" finds
               "United States of America")
3. reverse  -- the input contains the table name ("Republic of Germany"
               finds "Germany")

Within a pass the first record in table order wins, so ties between
overlapping names ("Guinea", "Equatorial Guinea") are decided by the order
of the reference table.  Short inputs can produce surprising partial
matches; that is an accepted limitation of the heuristic.

Unmatched, empty or missing input resolves to an empty string.
"""

from __future__ import annotations

from typing import Iterable, Optional, Tuple

from countries import COUNTRY_FLAGS, CountryRecord


class FlagResolver:
    """Resolve free-form country names against a fixed reference table."""

    def __init__(self, records: Iterable[CountryRecord]) -> None:
        # Lower-case names once; records without a name would match every
        # input in the reverse pass.
        self._table: Tuple[Tuple[str, str], ...] = tuple(
            (record.name.lower(), record.emoji)
            for record in records
            if record.name
        )

    def __len__(self) -> int:
        return len(self._table)

    def resolve(self, country_name: Optional[str]) -> str:
        """Return the flag emoji for ``country_name`` or ``""``."""
        if not country_name:
            return ""
        needle = country_name.lower()

        for name, emoji in self._table:
            if name == needle:
                return emoji
        for name, emoji in self._table:
            if needle in name:
                return emoji
        for name, emoji in self._table:
            if name in needle:
                return emoji
        return ""


# Shared resolver over the bundled reference table
_default_resolver = FlagResolver(COUNTRY_FLAGS)


def get_country_flag(country_name: Optional[str]) -> str:
    """Return the flag emoji for a country name using the bundled table."""
    return _default_resolver.resolve(country_name)
