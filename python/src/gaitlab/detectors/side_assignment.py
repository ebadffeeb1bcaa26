"""Alternating Left/Right labelling of heel-strike events."""

from dataclasses import replace
from typing import Iterable, List

from .._types import LEFT, RIGHT, GaitEvent


def assign_sides(events: Iterable[GaitEvent], start_with_left: bool = True) -> List[GaitEvent]:
    """Sort events by time and label them by parity of position.

    Even positions among the active (non-excluded) events get the starting
    side, odd positions the other one.  An excluded event takes the side
    the next active event would get if it were re-included, so it never
    breaks the alternation of the active sequence.

    Labels are recomputed from scratch on every call: inserting, removing
    or excluding one event relabels everything after it.  The input is not
    modified; relabelled copies are returned.
    """
    first, second = (LEFT, RIGHT) if start_with_left else (RIGHT, LEFT)
    labelled = []
    active = 0
    for ev in sorted(events, key=lambda e: e.time):
        labelled.append(replace(ev, side=first if active % 2 == 0 else second))
        if not ev.excluded:
            active += 1
    return labelled
