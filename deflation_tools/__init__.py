from .geometry import G, T, VERTEX_DISTANCES
from .Tile import Tile, TileType
from .Operations import Operations, DEFAULT_CONFIG
from .ImageRenderer import ImageRenderer
from .events import shutdown_event

# OptimizedRenderer needs an OpenGL context; import it from
# deflation_tools.OptimizedRenderer once a window exists.
__all__ = ['G', 'T', 'VERTEX_DISTANCES', 'Tile', 'TileType', 'Operations',
           'DEFAULT_CONFIG', 'ImageRenderer', 'shutdown_event']
