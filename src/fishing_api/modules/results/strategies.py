"""Rating change strategies applied when event results are published.

``placement`` is the fixed table used by default: 1st +20, 2nd +10, 3rd 0,
everyone else -10, regardless of score. ``elo`` treats a results table as a
round robin: every participant is compared with every other one, scoring 1 for
a better place, 0.5 for the same place and 0 for a worse one, and the change is
``round(K * mean(actual - expected))`` over those pairings.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Literal, NamedTuple

RatingStrategy = Literal["placement", "elo"]

PLACEMENT_CHANGES = {1: 20, 2: 10, 3: 0}
PLACEMENT_CHANGE_OTHERWISE = -10


class RatedPlacement(NamedTuple):
    rating: int
    place: int


def placement_change(place: int) -> int:
    return PLACEMENT_CHANGES.get(place, PLACEMENT_CHANGE_OTHERWISE)


def expected_score(rating: float, opponent_rating: float) -> float:
    return 1.0 / (1.0 + 10.0 ** ((opponent_rating - rating) / 400.0))


def _actual_score(place: int, opponent_place: int) -> float:
    if place < opponent_place:
        return 1.0
    if place == opponent_place:
        return 0.5
    return 0.0


def elo_changes(entries: Sequence[RatedPlacement], *, k_factor: float) -> list[int]:
    if len(entries) < 2:
        return [0 for _ in entries]
    changes: list[int] = []
    for index, entry in enumerate(entries):
        total = 0.0
        for other_index, other in enumerate(entries):
            if other_index == index:
                continue
            total += _actual_score(entry.place, other.place) - expected_score(
                entry.rating, other.rating
            )
        changes.append(round(k_factor * total / (len(entries) - 1)))
    return changes


def compute_rating_changes(
    entries: Sequence[RatedPlacement],
    *,
    strategy: RatingStrategy,
    k_factor: float,
) -> list[int]:
    if strategy == "elo":
        return elo_changes(entries, k_factor=k_factor)
    return [placement_change(entry.place) for entry in entries]
