# deflation_tools/ImageRenderer.py
import logging

from PIL import Image, ImageDraw

from .Operations import Operations


class ImageRenderer:
    """Headless renderer that rasterizes the tiling into a Pillow image."""

    def __init__(self, operations=None):
        self.logger = logging.getLogger('ImageRenderer')
        self.operations = operations or Operations()

    def render_tiles(self, width, height, config_data, generations=None):
        if generations is None:
            generations = config_data['generations']
        scale = max(1, int(config_data.get('supersample', 1)))

        tiles = self.operations.tiling(width, height, generations)
        polygons = self.operations.tile_polygons(tiles) * scale

        image = Image.new('RGB', (width * scale, height * scale), tuple(config_data['background']))
        draw = ImageDraw.Draw(image)
        fills = {
            True: tuple(config_data['kite_color']),
            False: tuple(config_data['dart_color']),
        }
        outline = tuple(config_data['stroke_color'])

        for tile, corners in zip(tiles, polygons):
            draw.polygon([tuple(point) for point in corners.tolist()],
                         fill=fills[tile.is_kite], outline=outline)

        if scale > 1:
            image = image.resize((width, height), Image.Resampling.LANCZOS)

        self.logger.info(f"Rasterized {len(tiles)} tiles into a {width}x{height} image")
        return image
