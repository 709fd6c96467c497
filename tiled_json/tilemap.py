"""
Tiled JSON maps and GID resolution

=============================================================================
GLOBAL TILE IDs (GIDs)
=============================================================================

Tiles are referenced by Global IDs (GIDs) across all tilesets of a map:

    Tileset A (firstgid=1):   tiles 1-100
    Tileset B (firstgid=101): tiles 101-200

    GID 0   = empty tile (no graphic)
    GID 50  = tile 49 of tileset A (50 - 1)
    GID 150 = tile 49 of tileset B (150 - 101)

A GID belongs to the tileset with the largest firstgid <= gid.
Local tile ID within tileset = GID - firstgid

=============================================================================
USAGE
=============================================================================

    tile_map = load_map_file("maps/town.json")
    ground = tile_map.get_layer_by_name("Ground")
    gid = ground.get_tile_gid(5, 10)

    tileset = tile_map.get_tileset(gid)     # loaded lazily, then cached
    rect = tile_map.get_tile_rect(gid)      # where the tile is in tileset.image

A TileMap is not safe to share between threads: resolution sorts tilesets
in place and fills the tileset cache.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Union

from .enums import OrientationType, RenderOrderType, StaggerAxisType, StaggerIndexType
from .errors import (
    DivisionByZeroColumns, MalformedDocument, NoOwningTileset,
    TiledJsonError, TilesetLoadFailure,
)
from .layers import Layer
from .properties import Property, find_property
from .schema import decode, json_field
from .tileset import Tileset, decode_tileset, load_tileset_file, parse_json


logger = logging.getLogger(__name__)

# External tilesets are always read as JSON siblings, whatever the map says
TILESET_EXTENSION = ".json"


@dataclass(frozen=True)
class Rect:
    """Pixel rectangle inside a tileset image."""
    x: int
    y: int
    width: int
    height: int


@dataclass
class TilesetRef:
    """
    Reference from a map to a tileset.

    first_gid: The first global tile ID of this tileset (this global ID maps
        to the first tile in this tileset).
    source: Path of the external tileset file.
    tileset: The tileset itself when it is embedded in the map instead.
    """
    first_gid: int = 0
    source: str = ""
    tileset: Optional[Tileset] = json_field(decode=False, default=None, repr=False)


@dataclass
class TileMap:
    background_color: Optional[str] = None   # #RRGGBB or #AARRGGBB
    class_: Optional[str] = None
    compression_level: int = -1               # -1 means algorithm default
    height: int = 0                           # Rows of tiles
    hex_side_length: int = 0                  # hexagonal maps only
    infinite: bool = False
    layers: List[Layer] = field(default_factory=list)
    next_layer_id: int = 0
    next_object_id: int = 0
    orientation: OrientationType = OrientationType.ORTHOGONAL
    parallax_origin_x: float = 0
    parallax_origin_y: float = 0
    properties: List[Property] = field(default_factory=list)
    render_order: RenderOrderType = RenderOrderType.RIGHT_DOWN
    stagger_axis: Optional[StaggerAxisType] = None    # staggered / hexagonal only
    stagger_index: Optional[StaggerIndexType] = None  # staggered / hexagonal only
    tiled_version: str = ""
    tile_height: int = 0
    tilesets: List[TilesetRef] = field(default_factory=list)
    tile_width: int = 0
    type: str = "map"
    version: str = ""                         # Kept as text, never parsed
    width: int = 0                            # Columns of tiles

    # Keyed by the GID that was asked for, not by tileset
    _tileset_cache: Dict[int, Tileset] = field(
        default_factory=dict, init=False, repr=False, compare=False
    )

    # =========================================================================
    # GID RESOLUTION
    # =========================================================================

    def get_tileset_ref(self, gid: int) -> TilesetRef:
        """
        Find the tileset reference that owns a GID.

        Sorts tilesets by first_gid, highest first, IN PLACE and returns the
        first one with first_gid <= gid. The declaration order of tilesets is
        lost after the first call.

        Raises:
        -------
        NoOwningTileset : gid is below every first_gid, or there are no tilesets
        """
        self.tilesets.sort(key=lambda ref: ref.first_gid, reverse=True)
        for ref in self.tilesets:
            if ref.first_gid <= gid:
                return ref
        raise NoOwningTileset(gid)

    def get_local_id(self, gid: int) -> int:
        return gid - self.get_tileset_ref(gid).first_gid

    def get_tileset(self, gid: int, force_reload: bool = False) -> Tileset:
        """
        Tileset owning a GID, loaded from its source on first use.

        The cache is keyed by gid: two GIDs of the same tileset load the
        file twice and hold two separate Tileset objects.

        Parameters:
        -----------
        gid : int
            Global tile ID
        force_reload : bool
            Read the source again even if gid is cached

        Raises:
        -------
        NoOwningTileset : no tileset owns gid
        TilesetLoadFailure : the source cannot be read or parsed
        """
        if not force_reload and gid in self._tileset_cache:
            logger.debug("Tileset cache hit for GID %d", gid)
            return self._tileset_cache[gid]

        ref = self.get_tileset_ref(gid)
        if ref.tileset is not None:
            tileset = ref.tileset
        else:
            try:
                tileset = load_tileset_file(ref.source)
            except (OSError, UnicodeDecodeError, TiledJsonError) as e:
                raise TilesetLoadFailure(ref.source, str(e)) from e

        self._tileset_cache[gid] = tileset
        return tileset

    def get_tile_rect(self, gid: int) -> Rect:
        """
        Pixel rectangle of a tile inside its tileset image.

        Example: columns=8, 16x16 tiles, first_gid=1, gid=21
            local id 20 -> column 4, row 2 -> Rect(64, 32, 16, 16)

        Margin and spacing are not applied.

        Raises:
        -------
        DivisionByZeroColumns : the tileset has 0 columns
        """
        tileset = self.get_tileset(gid)
        local_id = gid - self.get_tileset_ref(gid).first_gid

        if tileset.columns == 0:
            raise DivisionByZeroColumns(gid, tileset.name)

        x = local_id % tileset.columns
        y = local_id // tileset.columns
        return Rect(x * tileset.tile_width, y * tileset.tile_height,
                    tileset.tile_width, tileset.tile_height)

    # =========================================================================
    # LAYERS AND PROPERTIES
    # =========================================================================

    def iter_layers(self) -> Iterator[Layer]:
        """All layers, group contents included, depth first."""
        for layer in self.layers:
            yield from layer.iter_layers()

    def get_layer_by_name(self, name: str) -> Optional[Layer]:
        for layer in self.iter_layers():
            if layer.name == name:
                return layer
        return None

    def get_property(self, name: str) -> Optional[Property]:
        return find_property(self.properties, name)


# =============================================================================
# LOADING
# =============================================================================

def _attach_embedded_tilesets(tile_map: TileMap, raw_tilesets):
    """Parse tileset entries that carry their data inline instead of a source."""
    if not isinstance(raw_tilesets, list):
        return
    # decode() keeps array order, entries line up with tile_map.tilesets
    for ref, raw in zip(tile_map.tilesets, raw_tilesets):
        keys = {str(k).lower() for k in raw}
        if ref.source or keys <= {"firstgid", "source"}:
            continue
        ref.tileset = decode_tileset(raw, "TileMap.tilesets")
        ref.tileset.first_gid = ref.first_gid


def load_map(content: str, base_directory: Optional[Union[str, Path]] = None) -> TileMap:
    """
    Parse a map document.

    Parameters:
    -----------
    content : str
        JSON text of the map
    base_directory : str or Path, optional
        Directory holding the external tileset files. When given, each
        tileset source becomes base_directory/<stem of source>.json

    Returns:
    --------
    TileMap : map with decoded layer data

    Raises:
    -------
    MalformedDocument : invalid JSON or a value of the wrong shape
    InvalidEnumValue : unknown orientation, render order or stagger token
    UnsupportedEncoding, UnsupportedCompression, MalformedLayerData :
        a tile layer payload cannot be decoded
    """
    root = parse_json(content, "map")
    tile_map = decode(TileMap, root)

    for name in ("width", "height", "tile_width", "tile_height"):
        if getattr(tile_map, name) < 0:
            raise MalformedDocument(f"Map {name} is negative: {getattr(tile_map, name)}")

    raw_tilesets = {str(k).lower(): v for k, v in root.items()}.get("tilesets")
    _attach_embedded_tilesets(tile_map, raw_tilesets)

    # Layer data (b64 string or array of uint) becomes data
    for layer in tile_map.layers:
        layer.decode_data(tile_map.compression_level)

    if base_directory is not None:
        for ref in tile_map.tilesets:
            if not ref.source:
                continue
            source = os.path.join(str(base_directory), Path(ref.source).stem + TILESET_EXTENSION)
            logger.debug("Tileset source %s -> %s", ref.source, source)
            ref.source = source

    return tile_map


def load_map_file(path: Union[str, Path],
                  base_directory: Optional[Union[str, Path]] = None) -> TileMap:
    """
    Read and parse a map file (UTF-8).

    External tilesets are looked up next to the map unless base_directory
    says otherwise.
    """
    path = Path(path)
    if base_directory is None:
        base_directory = path.parent
    logger.debug("Loading map %s", path)
    with open(path, encoding='utf-8') as f:
        content = f.read()
    return load_map(content, base_directory)
