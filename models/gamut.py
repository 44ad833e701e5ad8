"""Colour gamut triangles.

A gamut is the triangle of CIE 1931 xy chromaticities a device can actually
reproduce. Points outside the triangle are pulled onto its nearest edge before
being sent to the device.
"""

import math
from dataclasses import dataclass

from core.errors import DecodeError

Point = tuple[float, float]


def closest_on_segment(a: Point, b: Point, x: float, y: float) -> Point:
    """Return the point on segment a-b closest to (x, y)."""
    hx, hy = x - a[0], y - a[1]
    jx, jy = b[0] - a[0], b[1] - a[1]
    k = (hx * jx + hy * jy) / (jx * jx + jy * jy)
    k = min(max(k, 0.0), 1.0)
    return a[0] + jx * k, a[1] + jy * k


@dataclass(frozen=True)
class Gamut:
    """Reproducible colour triangle of a device (red, green and blue vertices)."""
    red: Point
    green: Point
    blue: Point

    def __post_init__(self):
        (rx, ry), (gx, gy), (bx, by) = self.red, self.green, self.blue
        # Coincident or collinear vertices enclose no area
        if (gx - rx) * (by - ry) - (gy - ry) * (bx - rx) == 0:
            raise ValueError("gamut vertices must form a triangle")

    @classmethod
    def from_json(cls, value) -> 'Gamut':
        """Build a Gamut from the bridge's [[x, y], [x, y], [x, y]] list (red, green, blue)."""
        if not isinstance(value, list) or len(value) != 3:
            raise DecodeError("invalid colour gamut value")
        try:
            red, green, blue = ((float(p[0]), float(p[1])) for p in value)
            return cls(red, green, blue)
        except (TypeError, ValueError, IndexError) as e:
            raise DecodeError(f"invalid colour gamut value: {e}") from e

    def contains(self, x: float, y: float) -> bool:
        """Check whether (x, y) lies inside the triangle (edges included)."""
        ax, ay = self.green[0] - self.red[0], self.green[1] - self.red[1]
        bx, by = self.blue[0] - self.red[0], self.blue[1] - self.red[1]
        cx, cy = x - self.red[0], y - self.red[1]
        d = ax * by - ay * bx
        j = (cx * by - cy * bx) / d
        k = (ax * cy - ay * cx) / d
        return j >= 0 and k >= 0 and j + k <= 1

    def closest_point(self, x: float, y: float) -> Point:
        """Project (x, y) onto each edge and return the nearest projection."""
        candidates = (
            closest_on_segment(self.red, self.green, x, y),
            closest_on_segment(self.green, self.blue, x, y),
            closest_on_segment(self.blue, self.red, x, y),
        )
        return min(candidates, key=lambda p: math.hypot(x - p[0], y - p[1]))

    def correct(self, x: float, y: float) -> Point:
        """Return (x, y) unchanged when reachable, otherwise its nearest boundary point."""
        if self.contains(x, y):
            return x, y
        return self.closest_point(x, y)


# Used when a device does not report its own gamut
DEFAULT_GAMUT = Gamut(
    red=(0.692, 0.308),
    green=(0.17, 0.7),
    blue=(0.153, 0.048),
)
