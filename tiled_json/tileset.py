"""
Tileset documents - a set of tile graphics

=============================================================================
SPRITESHEET LAYOUT
=============================================================================

A tileset is one image divided into a grid of tiles:

    +---+---+---+---+
    | 0 | 1 | 2 | 3 |
    +---+---+---+---+
    | 4 | 5 | 6 | 7 |
    +---+---+---+---+

    columns = 4, local tile id = row * columns + column

Tiles are only listed in "tiles" when they carry extra data: animation
frames, their own image, a collision object group, properties.

=============================================================================
EXTERNAL TILESETS
=============================================================================

Maps usually reference tilesets stored in their own file:

    "tilesets": [{"firstgid": 1, "source": "terrain.json"}]

load_tileset() parses such a file. The map's firstgid is NOT part of the
tileset document, it stays on the map's TilesetRef.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union

from .errors import MalformedDocument
from .layers import Layer
from .properties import Property, find_property
from .schema import decode


logger = logging.getLogger(__name__)


@dataclass
class Grid:
    """Grid used for tile objects of this tileset."""
    height: int = 0
    orientation: str = "orthogonal"      # orthogonal or isometric
    width: int = 0


@dataclass
class TileOffset:
    """Pixel offset applied when drawing tiles of this tileset."""
    x: int = 0
    y: int = 0


@dataclass
class Transformations:
    h_flip: bool = False
    v_flip: bool = False
    rotate: bool = False
    prefer_untransformed: bool = False


@dataclass
class Frame:
    """One step of a tile animation."""
    duration: int = 0                    # Milliseconds
    tile_id: int = 0                     # Local tile ID to show


@dataclass
class Tile:
    """
    Per-tile data inside a tileset.

    The id is LOCAL to the tileset (0-based). Its GID in a map is
    first_gid + id.
    """
    animation: List[Frame] = field(default_factory=list)
    id: int = 0
    image: Optional[str] = None          # Image collection tilesets only
    image_height: int = 0
    image_width: int = 0
    x: int = 0                           # Sub-rectangle of the image
    y: int = 0
    width: int = 0
    height: int = 0
    object_group: Optional[Layer] = None  # Collision shapes
    probability: Optional[float] = None
    properties: List[Property] = field(default_factory=list)
    terrain: Optional[List[int]] = None  # Legacy terrain indexes
    type: Optional[str] = None

    def get_property(self, name: str) -> Optional[Property]:
        return find_property(self.properties, name)


@dataclass
class Terrain:
    """Legacy terrain definition (replaced by wang sets in Tiled 1.5)."""
    name: str = ""
    properties: List[Property] = field(default_factory=list)
    tile: int = 0


@dataclass
class WangColor:
    class_: Optional[str] = None
    color: str = ""
    name: str = ""
    probability: float = 0
    properties: List[Property] = field(default_factory=list)
    tile: int = 0


@dataclass
class WangTile:
    tile_id: int = 0
    wang_id: List[int] = field(default_factory=list)  # 8 color indexes, clockwise from top


@dataclass
class WangSet:
    class_: Optional[str] = None
    colors: List[WangColor] = field(default_factory=list)
    name: str = ""
    properties: List[Property] = field(default_factory=list)
    tile: int = 0
    type: str = ""                       # corner, edge or mixed
    wang_tiles: List[WangTile] = field(default_factory=list)


@dataclass
class Tileset:
    """
    Tileset document.

    Layout attributes used for tile lookup: columns, tile_width,
    tile_height, tile_count, margin, spacing, image.
    """
    background_color: Optional[str] = None
    class_: Optional[str] = None
    columns: int = 0                     # Tiles per row
    fill_mode: str = "stretch"
    first_gid: int = 0                   # Only set for tilesets embedded in a map
    grid: Optional[Grid] = None
    image: str = ""                      # Spritesheet path
    image_height: int = 0
    image_width: int = 0
    margin: int = 0                      # Pixels around the edge
    name: str = ""
    object_alignment: str = "unspecified"
    properties: List[Property] = field(default_factory=list)
    source: str = ""
    spacing: int = 0                     # Pixels between tiles
    terrains: Optional[List[Terrain]] = None
    tile_count: int = 0
    tiled_version: str = ""
    tile_height: int = 0
    tile_offset: Optional[TileOffset] = None
    tile_render_size: str = "tile"
    tiles: Optional[List[Tile]] = None
    tile_width: int = 0
    transformations: Optional[Transformations] = None
    transparent_color: Optional[str] = None
    type: str = "tileset"
    version: str = ""
    wang_sets: List[WangSet] = field(default_factory=list)

    def get_tile(self, local_id: int) -> Optional[Tile]:
        """Tile data for a local ID, or None if the tile has none."""
        for tile in self.tiles or []:
            if tile.id == local_id:
                return tile
        return None

    def get_property(self, name: str) -> Optional[Property]:
        return find_property(self.properties, name)


def parse_json(content: str, what: str):
    """json.loads() with errors reported as MalformedDocument."""
    try:
        root = json.loads(content)
    except (TypeError, ValueError) as e:
        raise MalformedDocument(f"Failed to deserialize {what}: {e}") from e
    if not isinstance(root, dict):
        raise MalformedDocument(
            f"Failed to deserialize {what}: root is {type(root).__name__}, not an object"
        )
    return root


def decode_tileset(raw: dict, where: str = "Tileset") -> Tileset:
    """Build a Tileset from an already parsed JSON object."""
    tileset = decode(Tileset, raw, where)

    # Tile collision groups are layers too
    for tile in tileset.tiles or []:
        if tile.object_group is not None:
            tile.object_group.decode_data()

    return tileset


def load_tileset(content: str) -> Tileset:
    """
    Parse a tileset document.

    Parameters:
    -----------
    content : str
        JSON text of the tileset

    Raises:
    -------
    MalformedDocument : invalid JSON or a value of the wrong shape
    """
    return decode_tileset(parse_json(content, "tileset"))


def load_tileset_file(path: Union[str, Path]) -> Tileset:
    """Read and parse a tileset file (UTF-8)."""
    logger.debug("Loading tileset %s", path)
    with open(path, encoding='utf-8') as f:
        content = f.read()
    return load_tileset(content)
