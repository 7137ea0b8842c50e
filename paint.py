from __future__ import annotations
from typing import Optional, Tuple, Union

NONZERO = 'nonzero'
EVENODD = 'evenodd'
FILL_RULES = (NONZERO, EVENODD)

MITER = 'miter'
BEVEL = 'bevel'
ROUND = 'round'
LINE_JOINS = (MITER, BEVEL, ROUND)

DEFAULT_MITER_LIMIT = 4.0

# substituted for gradients and patterns
FALLBACK_COLOR = (0, 0, 0)

class PaintServer:
    """An unresolved indirect paint such as url(#gradient)."""

    def __init__(self, reference: str):
        self.reference = reference

    def __eq__(self, other):
        return isinstance(other, PaintServer) and self.reference == other.reference

    def __repr__(self):
        return f"PaintServer({self.reference!r})"

Color = Union[Tuple[int, int, int], PaintServer]

class LineJoin:
    def __init__(self, kind: str = MITER, miter_limit: float = DEFAULT_MITER_LIMIT):
        if kind not in LINE_JOINS:
            kind = MITER
        self.kind = kind
        self.miter_limit = miter_limit if kind == MITER else None

    @classmethod
    def miter(cls, limit: float = DEFAULT_MITER_LIMIT) -> 'LineJoin':
        return cls(MITER, limit)

    @classmethod
    def bevel(cls) -> 'LineJoin':
        return cls(BEVEL)

    @classmethod
    def round(cls) -> 'LineJoin':
        return cls(ROUND)

    def __eq__(self, other):
        if not isinstance(other, LineJoin):
            return NotImplemented
        return self.kind == other.kind and self.miter_limit == other.miter_limit

    def __repr__(self):
        if self.kind == MITER:
            return f"LineJoin.miter({self.miter_limit})"
        return f"LineJoin.{self.kind}()"

class Fill:
    def __init__(self, color: Color, alpha: float = 1.0, rule: str = NONZERO):
        self.color = color
        self.alpha = alpha
        self.rule = rule if rule in FILL_RULES else NONZERO

    def __repr__(self):
        return f"Fill({self.color!r}, alpha={self.alpha}, rule={self.rule!r})"

class Stroke:
    def __init__(self, color: Color, alpha: float = 1.0, width: float = 1.0,
                 join: Optional[LineJoin] = None):
        self.color = color
        self.alpha = alpha
        self.width = width
        self.join = join or LineJoin()

    def __repr__(self):
        return f"Stroke({self.color!r}, alpha={self.alpha}, width={self.width}, join={self.join!r})"
