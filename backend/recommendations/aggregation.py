from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Iterable, Mapping

from .location import DEFAULT_TOLERANCE, is_valid_coordinate, quantize
from .models import CanonicalEntry, RawSubmission

logger = logging.getLogger(__name__)

UNKNOWN_PLACE = "unknown place"


@dataclass
class LocationGroup:
    """All submissions that quantize to one location key.

    ``x``/``y`` are the raw coordinates of the first row seen for the key.
    The counters are insertion-ordered: ``list(name_counts)`` gives the
    distinct names in the order they were first submitted.
    """

    location_key: str
    x: float
    y: float
    name_counts: Counter[str] = field(default_factory=Counter)
    address_counts: Counter[str] = field(default_factory=Counter)
    reasons: list[str] = field(default_factory=list)

    def add(self, row: RawSubmission) -> None:
        if row.place_name:
            self.name_counts[row.place_name] += 1
        if row.address:
            self.address_counts[row.address] += 1
        if row.reason:
            self.reasons.append(row.reason)


def accumulate(
    rows: Iterable[RawSubmission],
    tolerance: float = DEFAULT_TOLERANCE,
) -> dict[str, LocationGroup]:
    """Group rows by location key, keeping keys in first-seen order.

    Input order matters: the first row of a key fixes the group's
    coordinates and the tie-break order of its names and addresses.
    Rows with missing or non-finite coordinates are skipped.
    """
    groups: dict[str, LocationGroup] = {}
    for row in rows:
        if not (is_valid_coordinate(row.x) and is_valid_coordinate(row.y)):
            logger.warning(
                "Skipping submission %s with invalid coordinates (%r, %r)",
                row.id, row.x, row.y,
            )
            continue

        key = quantize(row.x, row.y, tolerance)
        group = groups.get(key)
        if group is None:
            group = LocationGroup(location_key=key, x=row.x, y=row.y)
            groups[key] = group
        group.add(row)
    return groups


def _most_frequent(counts: Counter[str], default: str) -> str:
    """Highest count wins; on a tie the earliest-inserted value is kept."""
    best = default
    best_count = 0
    for value, count in counts.items():
        if count > best_count:
            best = value
            best_count = count
    return best


def select_representative(group: LocationGroup) -> tuple[str, str]:
    """Return the display ``(place_name, address)`` for a group."""
    place_name = _most_frequent(group.name_counts, UNKNOWN_PLACE)
    address = _most_frequent(group.address_counts, "")
    return place_name, address


def build_output(
    groups: Mapping[str, LocationGroup],
    tolerance: float = DEFAULT_TOLERANCE,
) -> dict[str, CanonicalEntry]:
    """Key each group by its chosen name, suffixing the location key on collisions.

    A group whose name is already taken is compared only against the entry
    holding the plain name. Entries created under a suffixed key are never
    consulted again.
    """
    output: dict[str, CanonicalEntry] = {}
    for group in groups.values():
        place_name, address = select_representative(group)

        existing = output.get(place_name)
        if existing is None:
            output[place_name] = _make_entry(place_name, place_name, address, group)
            continue

        if quantize(existing.x, existing.y, tolerance) == group.location_key:
            existing.reasons.extend(group.reasons)
            continue

        display_key = f"{place_name}_{group.location_key}"
        output[display_key] = _make_entry(display_key, place_name, address, group)
    return output


def _make_entry(
    display_key: str,
    place_name: str,
    address: str,
    group: LocationGroup,
) -> CanonicalEntry:
    return CanonicalEntry(
        display_key=display_key,
        place_name=place_name,
        address=address,
        x=group.x,
        y=group.y,
        reasons=list(group.reasons),
    )


def aggregate(
    rows: Iterable[RawSubmission],
    tolerance: float = DEFAULT_TOLERANCE,
) -> dict[str, CanonicalEntry]:
    """Collapse raw submissions into one canonical entry per physical place."""
    return build_output(accumulate(rows, tolerance), tolerance)
