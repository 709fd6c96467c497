#!/usr/bin/env python3

"""
Tiled JSON inspector - prints what a map (and optionally a tileset) contains

Usage:
    python -m tiled_json [-v] <map.json> [tileset.json]

Options:
    -v          - Debug logging (tileset loads, cache hits)

Example:
    python -m tiled_json maps/town.json maps/terrain.json
"""

import logging
import sys
from pathlib import Path
from typing import List, Optional

from .errors import TiledJsonError
from .logging_config import setup_logging
from .tilemap import TileMap, load_map_file
from .tileset import Tileset, load_tileset_file


def print_map(tile_map: TileMap):
    print(f"Map: {tile_map.type} {tile_map.version} {tile_map.width}x{tile_map.height}")
    for prop in tile_map.properties:
        print(f"Property: name={prop.name:<8} type={prop.type:<8} value={prop.value!r}")
    for layer in tile_map.iter_layers():
        print(f"Layer: {layer.name} ({layer.type}) tiles={len(layer.data)}")
    for ref in tile_map.tilesets:
        print(f"Tileset ref: firstgid={ref.first_gid} source={ref.source}")


def print_tileset(tileset: Tileset):
    print(f"Tileset: {tileset.name} {tileset.tile_count} {tileset.tile_width}x{tileset.tile_height}")
    for tile in tileset.tiles or []:
        for frame in tile.animation:
            print(f"Tile: {frame.tile_id} {frame.duration}")


def main(argv: Optional[List[str]] = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)

    verbose = "-v" in args
    args = [arg for arg in args if arg != "-v"]
    setup_logging(logging.DEBUG if verbose else logging.WARNING)

    if not args:
        print(__doc__)
        return 1

    for path in args[:2]:
        if not Path(path).exists():
            print(f"Error: File '{path}' not found")
            return 1

    try:
        print_map(load_map_file(args[0]))
        if len(args) > 1:
            print()
            print_tileset(load_tileset_file(args[1]))
    except (TiledJsonError, UnicodeDecodeError) as e:
        print(f"Error: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
