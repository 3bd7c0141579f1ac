from __future__ import annotations

import math

from floorgrid.core.coordinates import GridPoint


def snap_to_axis(last: GridPoint, cursor: GridPoint) -> GridPoint:
    """Constrain ``cursor`` to the horizontal, vertical or 45 degree line through ``last``.

    The axis with the smallest deviation wins: ``|dy|`` for horizontal, ``|dx|``
    for vertical and ``||dx| - |dy||`` for diagonal. Ties prefer diagonal, then
    horizontal.
    """
    lx, ly = float(last[0]), float(last[1])
    dx = float(cursor[0]) - lx
    dy = float(cursor[1]) - ly
    adx, ady = abs(dx), abs(dy)
    horizontal = ady
    vertical = adx
    diagonal = abs(adx - ady)
    best = min(horizontal, vertical, diagonal)
    if best == diagonal:
        d = min(adx, ady)
        return (lx + math.copysign(d, dx), ly + math.copysign(d, dy))
    if best == horizontal:
        return (lx + dx, ly)
    return (lx, ly + dy)
