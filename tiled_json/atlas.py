"""
Cutting tile graphics out of tileset images (uses PIL)

=============================================================================
HOW A TILE IS FOUND
=============================================================================

    GID --> TileMap.get_tileset(gid)  --> tileset.image (spritesheet path)
        --> TileMap.get_tile_rect(gid) --> Rect(x, y, width, height)
        --> image.crop((x, y, x + width, y + height))

Example: 16x16 tiles, 8 columns, GID 21 of a tileset with firstgid 1

    +---+---+---+---+---+---+---+---+
    | 0 | 1 | 2 | 3 | 4 | 5 | 6 | 7 |   <- row 0
    +---+---+---+---+---+---+---+---+
    | 8 | 9 |10 |11 |12 |13 |14 |15 |   <- row 1
    +---+---+---+---+---+---+---+---+
    |16 |17 |18 |19 |20 |...            <- row 2, tile 20 at x=64, y=32

=============================================================================
CACHING
=============================================================================

Spritesheets are opened once per image path and kept in RGBA. Cropped
tiles are not cached; PIL's crop is cheap compared to reading the file.
Nothing here draws anything, the caller decides what to do with the tile.
"""

from pathlib import Path
from typing import Dict, Union

from PIL import Image

from .tilemap import TileMap


class TileAtlas:
    """
    GID -> tile image lookup for one map.

    Parameters:
    -----------
    tile_map : TileMap
        Map whose tilesets are used
    image_root : str or Path
        Directory that tileset image paths are relative to
    """

    def __init__(self, tile_map: TileMap, image_root: Union[str, Path] = "."):
        self.tile_map = tile_map
        self.image_root = Path(image_root)

        # image path -> full RGBA spritesheet
        self.sheet_cache: Dict[Path, Image.Image] = {}

    def get_sheet(self, gid: int) -> Image.Image:
        """
        Full tileset image of the tileset owning gid.

        Raises:
        -------
        ValueError : the tileset has no spritesheet image
        FileNotFoundError : the image file does not exist
        """
        tileset = self.tile_map.get_tileset(gid)
        if not tileset.image:
            raise ValueError(f"Tileset '{tileset.name}' has no image")

        image_path = self.image_root / tileset.image
        sheet = self.sheet_cache.get(image_path)
        if sheet is None:
            with Image.open(image_path) as image:
                sheet = image.convert('RGBA')
            self.sheet_cache[image_path] = sheet
        return sheet

    def tile_image(self, gid: int) -> Image.Image:
        """The tile's pixels, cropped from its tileset image."""
        sheet = self.get_sheet(gid)
        rect = self.tile_map.get_tile_rect(gid)
        return sheet.crop((rect.x, rect.y, rect.x + rect.width, rect.y + rect.height))
