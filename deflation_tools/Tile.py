#Tile.py

import math
from enum import IntEnum

from deflation_tools.geometry import T, VERTEX_DISTANCES


class TileType(IntEnum):
    """The two P2 prototiles. Values index VERTEX_DISTANCES."""
    KITE = 0
    DART = 1


class Tile:
    __slots__ = ('kind', 'x', 'y', 'angle', 'size')

    def __init__(self, kind, x, y, angle, size):
        if not size > 0:
            raise ValueError(f"Tile size must be positive, got {size}")
        self.kind = TileType(kind)
        self.x = x
        self.y = y
        # Never wrapped into [0, 2pi): identity depends on the exact value.
        self.angle = angle
        self.size = size

    @property
    def is_kite(self):
        return self.kind == TileType.KITE

    @property
    def key(self):
        """Identity of the tile. Size is deliberately left out."""
        return (self.kind, self.x, self.y, self.angle)

    def __hash__(self):
        return hash(self.key)

    def __eq__(self, other):
        if not isinstance(other, Tile):
            return False
        return self.key == other.key

    def vertices(self):
        """Return the anchor followed by the three computed corners."""
        distances = VERTEX_DISTANCES[self.kind]
        theta = self.angle - T
        points = [(self.x, self.y)]
        for i in range(3):
            x = self.x + distances[i] * self.size * math.cos(theta)
            y = self.y - distances[i] * self.size * math.sin(theta)
            points.append((x, y))
            theta += T
        return points

    def __repr__(self):
        return (f"Tile({self.kind.name}, x={self.x!r}, y={self.y!r}, "
                f"angle={self.angle!r}, size={self.size!r})")
