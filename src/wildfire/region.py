"""Axis-aligned rectangles and the flammable regions placed on a scene."""

from dataclasses import dataclass, replace


@dataclass(frozen=True)
class Rect:
    """An axis-aligned rectangle in pixel space, anchored at its top-left."""

    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def intersects(self, other: "Rect") -> bool:
        """
        Check whether two rectangles overlap.

        Rectangles that only share an edge do not overlap.
        """
        return not (
            other.x >= self.right
            or other.right <= self.x
            or other.y >= self.bottom
            or other.bottom <= self.y
        )


@dataclass(frozen=True)
class FlammableRegion:
    """A freely placed rectangular area that may be marked as flammable."""

    x: float
    y: float
    width: float
    height: float
    flammable: bool = False
    id: int = 0

    @property
    def rect(self) -> Rect:
        return Rect(self.x, self.y, self.width, self.height)

    def is_flammable(self) -> bool:
        return self.flammable

    def with_flammable(self, flammable: bool = True) -> "FlammableRegion":
        return replace(self, flammable=flammable)


def intersects(region: FlammableRegion | Rect, cell_rect: Rect) -> bool:
    """Check whether a region overlaps the pixel box of a grid cell."""
    rect = region.rect if isinstance(region, FlammableRegion) else region
    return rect.intersects(cell_rect)
