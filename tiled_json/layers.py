"""
Layers, chunks and placed objects of a Tiled JSON map

=============================================================================
LAYER TYPES
=============================================================================

All layer kinds share one Layer class; the "type" key tells them apart:

- tilelayer:   grid of GIDs in data (or in chunks for infinite maps)
- objectgroup: objects (rectangles, points, polygons, tile objects, text)
- imagelayer:  a single image
- group:       folder of child layers (layers), may be nested

Fields that do not apply to a layer's type keep their defaults.

=============================================================================
TILE DATA
=============================================================================

The JSON "data" key is loaded into raw_data as found (array or base64
string). decode_data() turns it into data, an array.array('I') of GIDs,
and drops raw_data. TileMap loading runs it on every layer, so callers only
ever see data.

    gid = layer.get_tile_gid(5, 10)   # column 5, row 10
    grid = layer.as_grid()             # numpy array [row, column]
"""

import array
from dataclasses import dataclass, field
from typing import Any, Iterator, List, Optional

import numpy as np

from .layer_data import decode_layer_data
from .properties import Property, find_property
from .schema import json_field


@dataclass
class Point:
    x: float = 0
    y: float = 0


@dataclass
class TextObject:
    """Text payload of a text object."""
    bold: bool = False
    color: str = "#000000"
    font_family: str = "sans-serif"
    h_align: str = "left"                # left, center, right, justify
    italic: bool = False
    kerning: bool = True
    pixel_size: int = 16
    strikeout: bool = False
    text: str = ""
    underline: bool = False
    v_align: str = "top"                 # top, center, bottom
    wrap: bool = False


@dataclass
class TiledObject:
    """
    Object placed on an object layer.

    Plain rectangles use x/y/width/height. Points and ellipses set the
    matching flag, polygons and polylines list their vertices relative to
    (x, y), tile objects carry a GID and text objects a TextObject.
    """
    ellipse: bool = False
    gid: int = 0                          # Tile GID (tile objects only)
    height: float = 0
    id: int = 0
    name: str = ""
    point: bool = False
    polygon: List[Point] = field(default_factory=list)
    polyline: List[Point] = field(default_factory=list)
    properties: List[Property] = field(default_factory=list)
    rotation: float = 0                   # Degrees clockwise
    template: str = ""                    # Template file reference
    text: Optional[TextObject] = None
    type: Optional[str] = None
    visible: bool = True
    width: float = 0
    x: float = 0
    y: float = 0

    def get_property(self, name: str) -> Optional[Property]:
        return find_property(self.properties, name)


@dataclass
class Chunk:
    """Rectangular piece of an infinite tile layer."""
    raw_data: Any = json_field('data', default=None, repr=False)
    data: array.array = json_field(decode=False, default_factory=lambda: array.array('I'))
    height: int = 0
    width: int = 0
    x: int = 0
    y: int = 0


@dataclass
class Layer:
    chunks: Optional[List[Chunk]] = None
    class_: Optional[str] = None
    compression: str = ""                 # zlib, gzip, zstd or empty. tilelayer only.
    raw_data: Any = json_field('data', default=None, repr=False)
    data: array.array = json_field(decode=False, default_factory=lambda: array.array('I'))
    draw_order: str = ""                  # topdown or index. objectgroup only.
    encoding: str = ""                    # csv or base64. tilelayer only.
    height: int = 0
    id: int = 0
    image: str = ""                       # imagelayer only
    layers: Optional[List['Layer']] = None  # group only
    locked: bool = False
    name: str = ""
    objects: Optional[List[TiledObject]] = None
    offset_x: float = 0
    offset_y: float = 0
    opacity: float = 1.0                  # 0..1
    parallax_x: float = 1
    parallax_y: float = 1
    properties: List[Property] = field(default_factory=list)
    repeat_x: bool = False
    repeat_y: bool = False
    start_x: int = 0
    start_y: int = 0
    tint_color: Optional[str] = None
    transparent_color: Optional[str] = None
    type: str = ""                        # tilelayer, objectgroup, imagelayer, group
    visible: bool = True
    width: int = 0
    x: int = 0
    y: int = 0

    def decode_data(self, compression_level: int = -1):
        """
        Decode raw payloads of this layer, its chunks and its child layers.

        Parameters:
        -----------
        compression_level : int
            The map's compressionlevel, only used in error reports
        """
        if self.raw_data is not None:
            self.data = decode_layer_data(
                self.raw_data, self.encoding, self.compression, compression_level
            )
            self.raw_data = None

        # Chunks share the encoding of their layer
        for chunk in self.chunks or []:
            if chunk.raw_data is not None:
                chunk.data = decode_layer_data(
                    chunk.raw_data, self.encoding, self.compression, compression_level
                )
                chunk.raw_data = None

        for child in self.layers or []:
            child.decode_data(compression_level)

    def get_tile_gid(self, x: int, y: int) -> int:
        """GID at column x, row y. Out of bounds (or no data) means empty: 0."""
        if 0 <= x < self.width and 0 <= y < self.height:
            index = y * self.width + x
            if index < len(self.data):
                return self.data[index]
        return 0

    def as_grid(self) -> np.ndarray:
        """
        Tile data as a (height, width) uint32 array.

        Raises:
        -------
        ValueError : data does not hold width * height tiles
                     (infinite layers keep their tiles in chunks)
        """
        grid = np.array(self.data, dtype=np.uint32)
        return grid.reshape((self.height, self.width))

    def iter_layers(self) -> Iterator['Layer']:
        """This layer followed by all nested child layers, depth first."""
        yield self
        for child in self.layers or []:
            yield from child.iter_layers()

    def get_property(self, name: str) -> Optional[Property]:
        return find_property(self.properties, name)
