# deflation_tools/geometry.py
import math

G = (1 + math.sqrt(5)) / 2  # golden ratio
T = math.pi / 5  # 36 degrees, the base angle of the P2 tiles

# Distance of each computed vertex from the tile anchor, in units of tile size.
# Indexed by TileType value: kite = 0, dart = 1.
VERTEX_DISTANCES = (
    (G, G, G),
    (-G, -1, -G),
)


def displace(x, y, angle, size):
    """Move a point G * size along angle (screen y grows downwards).

    Every child anchor goes through here so that tiles generated by two
    different parents round to exactly the same coordinates.
    """
    return x + math.cos(angle) * G * size, y - math.sin(angle) * G * size
