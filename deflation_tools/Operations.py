import math
import time
import logging
import configparser
from collections import OrderedDict

import numpy as np

from deflation_tools.geometry import G, T, displace
from deflation_tools.Tile import Tile, TileType

DEFAULT_CONFIG = {
    'width': 960,
    'height': 540,
    'generations': 7,
    'interval': 10,
    'supersample': 1,
    'kite_color': [255, 200, 0],
    'dart_color': [255, 255, 0],
    'stroke_color': [64, 64, 64],
    'background': [255, 255, 255],
}

INT_SETTINGS = ('width', 'height', 'generations', 'interval', 'supersample')
COLOR_SETTINGS = ('kite_color', 'dart_color', 'stroke_color', 'background')


class Operations:
    def __init__(self, cache_size=8):
        self.logger = logging.getLogger('Operations')
        self.config = configparser.ConfigParser()
        self.cache_size = cache_size
        self.tiles_cache = OrderedDict()

    # -------------------------------------------------------------------------
    # Configuration
    # -------------------------------------------------------------------------

    def write_config_file(self, config_path, settings):
        config = configparser.ConfigParser()
        config['Settings'] = {}
        for key, value in settings.items():
            if isinstance(value, (list, tuple)):
                config['Settings'][key] = ', '.join(map(str, value))
            else:
                config['Settings'][key] = str(value)
        with open(config_path, 'w') as configfile:
            config.write(configfile)

    def read_config_file(self, config_path):
        """Read [Settings] from an INI file, filling gaps from DEFAULT_CONFIG."""
        self.config = configparser.ConfigParser()
        self.config.read(config_path)
        settings = {key: (list(value) if isinstance(value, list) else value)
                    for key, value in DEFAULT_CONFIG.items()}
        if not self.config.has_section('Settings'):
            return settings

        section = self.config['Settings']
        for key in INT_SETTINGS:
            if key in section:
                settings[key] = section.getint(key)
        for key in COLOR_SETTINGS:
            if key in section:
                color = [int(x.strip()) for x in section[key].strip('()').split(',')]
                if len(color) != 3:
                    raise ValueError(f"{key} needs three components, got {section[key]!r}")
                settings[key] = self.clamp_color(color)
        return settings

    def clamp_color(self, color):
        """Ensure all color values are within the legal RGB range."""
        return [max(0, min(255, int(c))) for c in color]

    # -------------------------------------------------------------------------
    # Seeding and deflation
    # -------------------------------------------------------------------------

    def seed_prototiles(self, width, height):
        """Ring of kites sharing the canvas center (the "sun")."""
        for value in (width, height):
            if not (math.isfinite(value) and value > 0):
                raise ValueError(f"Canvas dimensions must be positive, got {width}x{height}")

        x, y = width / 2, height / 2
        size = width / 2.5
        proto = []
        a = math.pi / 2 + T
        while a < 3 * math.pi:
            proto.append(Tile(TileType.KITE, x, y, a, size))
            a += 2 * T
        return proto

    def substitute(self, tile):
        """Children of a single tile, before any deduplication."""
        x, y, a = tile.x, tile.y, tile.angle
        size = tile.size / G
        children = []

        if tile.kind == TileType.DART:
            children.append(Tile(TileType.KITE, x, y, a + 5 * T, size))
            for sign in (1, -1):
                angle = a - 4 * T * sign
                nx, ny = displace(x, y, angle, tile.size)
                children.append(Tile(TileType.DART, nx, ny, angle, size))
        else:
            for sign in (1, -1):
                children.append(Tile(TileType.DART, x, y, a - 4 * T * sign, size))
                nx, ny = displace(x, y, a - T * sign, tile.size)
                children.append(Tile(TileType.KITE, nx, ny, a + 3 * T * sign, size))

        return children

    def remove_duplicates(self, tiles):
        """Drop repeated tiles, keeping the first occurrence of each."""
        return list(OrderedDict.fromkeys(tiles))

    def deflate_generations(self, tiles, generations):
        """Yield each deduplicated generation from 1 up to generations."""
        current = tiles
        for generation in range(1, max(generations, 0) + 1):
            t0 = time.perf_counter()
            children = [child for tile in current for child in self.substitute(tile)]
            current = self.remove_duplicates(children)
            self.logger.debug(
                f"Generation {generation}: {len(children)} children, "
                f"{len(current)} after deduplication in "
                f"{(time.perf_counter() - t0) * 1000:.1f}ms"
            )
            yield current

    def deflate(self, tiles, generations):
        """Deflate tiles the given number of times.

        A count of zero or less returns the input unchanged.
        """
        result = tiles
        for result in self.deflate_generations(tiles, generations):
            pass
        return result

    def generation_at(self, elapsed, generations, interval):
        """Generation to show after elapsed seconds when stepping one per interval."""
        if interval <= 0:
            return max(generations, 0)
        return max(0, min(generations, int(elapsed // interval)))

    def tiling(self, width, height, generations):
        """Seed and deflate, reusing earlier results for the same arguments."""
        cache_key = (width, height, generations)
        if cache_key in self.tiles_cache:
            self.tiles_cache.move_to_end(cache_key)
            return list(self.tiles_cache[cache_key])

        t0 = time.perf_counter()
        tiles = self.deflate(self.seed_prototiles(width, height), generations)
        self.logger.info(
            f"Generated {len(tiles)} tiles for {width}x{height} at generation "
            f"{max(generations, 0)} in {(time.perf_counter() - t0) * 1000:.1f}ms"
        )

        self.tiles_cache[cache_key] = tuple(tiles)
        while len(self.tiles_cache) > self.cache_size:
            self.tiles_cache.popitem(last=False)
        return list(tiles)

    # -------------------------------------------------------------------------
    # Polygons
    # -------------------------------------------------------------------------

    def tile_polygon(self, tile):
        """Closed outline of a tile: four corners with the first repeated."""
        points = tile.vertices()
        return points + [points[0]]

    def tile_polygons(self, tiles):
        """Corners of every tile packed as a float64 array of shape (N, 4, 2)."""
        if not tiles:
            return np.zeros((0, 4, 2), dtype=np.float64)
        return np.array([tile.vertices() for tile in tiles], dtype=np.float64)

    def calculate_centroid(self, tile):
        """Mean of the four corners of a tile."""
        xs, ys = zip(*tile.vertices())
        return sum(xs) / 4, sum(ys) / 4
