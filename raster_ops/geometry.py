"""Geometry - Integer points, rectangles and the placement helper shared by all tools."""

import operator
from typing import NamedTuple, Optional, Tuple


class Point(NamedTuple):
    """Point in the integer pixel plane."""

    x: int
    y: int

    def sub(self, other: Tuple[int, int]) -> 'Point':
        return Point(self.x - other[0], self.y - other[1])


class Rectangle(NamedTuple):
    """
    Half-open rectangle [x0, x1) x [y0, y1).

    Rectangles are never canonicalised: a rectangle with x1 < x0 or y1 < y0
    is simply empty.
    """

    x0: int
    y0: int
    x1: int
    y1: int

    @property
    def min(self) -> Point:
        return Point(self.x0, self.y0)

    @property
    def dx(self) -> int:
        return self.x1 - self.x0

    @property
    def dy(self) -> int:
        return self.y1 - self.y0

    @property
    def size(self) -> Point:
        return Point(self.dx, self.dy)

    def empty(self) -> bool:
        return self.x0 >= self.x1 or self.y0 >= self.y1

    def sub(self, p: Tuple[int, int]) -> 'Rectangle':
        return Rectangle(self.x0 - p[0], self.y0 - p[1], self.x1 - p[0], self.y1 - p[1])

    def intersect(self, other: 'Rectangle') -> 'Rectangle':
        """Largest rectangle inside both, or the zero rectangle if they don't overlap."""
        r = Rectangle(
            max(self.x0, other.x0),
            max(self.y0, other.y0),
            min(self.x1, other.x1),
            min(self.y1, other.y1),
        )
        if r.empty():
            return ZR
        return r

    def overlaps(self, other: 'Rectangle') -> bool:
        return (not self.empty() and not other.empty()
                and self.x0 < other.x1 and other.x0 < self.x1
                and self.y0 < other.y1 and other.y0 < self.y1)

    def contains(self, p: Tuple[int, int]) -> bool:
        return self.x0 <= p[0] < self.x1 and self.y0 <= p[1] < self.y1

    @classmethod
    def from_size(cls, pos: Tuple[int, int], size: Tuple[int, int]) -> 'Rectangle':
        return cls(pos[0], pos[1], pos[0] + size[0], pos[1] + size[1])


# Zero rectangle
ZR = Rectangle(0, 0, 0, 0)


def _coords(value, arity: int, kind: str):
    # Integers only (numpy integers included); floats raise TypeError
    message = f"Expected a {kind} of {arity} integers, got {value!r}"
    if not isinstance(value, (tuple, list)) or len(value) != arity:
        raise TypeError(message)
    try:
        return tuple(operator.index(v) for v in value)
    except TypeError as err:
        raise TypeError(message) from err


def as_point(value) -> Point:
    """Coerce a Point or (x, y) tuple of integers to a Point."""
    return Point(*_coords(value, 2, 'point'))


def as_rectangle(value) -> Rectangle:
    """Coerce a Rectangle or (x0, y0, x1, y1) tuple of integers to a Rectangle."""
    return Rectangle(*_coords(value, 4, 'rectangle'))


class Placement(NamedTuple):
    """Where a source lands inside a destination, in both local coordinate systems."""

    dst_offset: Point
    src_offset: Point
    width: int
    height: int

    @property
    def dst_rect(self) -> Rectangle:
        return Rectangle.from_size(self.dst_offset, (self.width, self.height))

    @property
    def src_rect(self) -> Rectangle:
        return Rectangle.from_size(self.src_offset, (self.width, self.height))


def place(dst_bounds: Rectangle, src_size: Tuple[int, int], pos: Tuple[int, int]) -> Optional[Placement]:
    """
    Intersect a source of src_size placed with its top-left at pos with dst_bounds.

    Args:
        dst_bounds: Destination bounds (any origin)
        src_size: (width, height) of the source
        pos: Top-left of the source, in the same coordinates as dst_bounds

    Returns:
        Placement with offsets local to each buffer, or None if nothing overlaps.
    """
    paste_rect = Rectangle.from_size(pos, src_size)
    if not dst_bounds.overlaps(paste_rect):
        return None

    inter = dst_bounds.intersect(paste_rect)
    return Placement(
        dst_offset=inter.min.sub(dst_bounds.min),
        src_offset=inter.min.sub(paste_rect.min),
        width=inter.dx,
        height=inter.dy,
    )
