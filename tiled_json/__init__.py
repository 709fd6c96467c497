"""
Tiled JSON maps and tilesets

Requisites:
    pip install numpy pillow
"""

from .enums import (
    OrientationType, RenderOrderType, StaggerAxisType, StaggerIndexType, parse_enum
)
from .errors import (
    TiledJsonError, MalformedDocument, InvalidEnumValue, ValueShapeMismatch,
    UnsupportedEncoding, UnsupportedCompression, MalformedLayerData,
    NoOwningTileset, DivisionByZeroColumns, TilesetLoadFailure,
)
from .layer_data import decode_layer_data
from .layers import Chunk, Layer, Point, TextObject, TiledObject
from .properties import Property
from .tileset import (
    Frame, Grid, Terrain, Tile, TileOffset, Tileset, Transformations,
    WangColor, WangSet, WangTile, load_tileset, load_tileset_file,
)
from .tilemap import Rect, TileMap, TilesetRef, load_map, load_map_file
from .atlas import TileAtlas

__version__ = "1.0.0"
__all__ = [
    "load_map",
    "load_map_file",
    "load_tileset",
    "load_tileset_file",
    "decode_layer_data",
    "parse_enum",
    "TileMap",
    "TilesetRef",
    "Rect",
    "Layer",
    "Chunk",
    "TiledObject",
    "Point",
    "TextObject",
    "Property",
    "Tileset",
    "Tile",
    "Frame",
    "Grid",
    "TileOffset",
    "Transformations",
    "Terrain",
    "WangSet",
    "WangColor",
    "WangTile",
    "TileAtlas",
    "OrientationType",
    "RenderOrderType",
    "StaggerAxisType",
    "StaggerIndexType",
    "TiledJsonError",
    "MalformedDocument",
    "InvalidEnumValue",
    "ValueShapeMismatch",
    "UnsupportedEncoding",
    "UnsupportedCompression",
    "MalformedLayerData",
    "NoOwningTileset",
    "DivisionByZeroColumns",
    "TilesetLoadFailure",
]
