import base64
import copy
import json
import struct

import pytest


TERRAIN_TILESET = {
    "name": "terrain",
    "type": "tileset",
    "version": "1.10",
    "tiledversion": "1.10.2",
    "columns": 8,
    "tilewidth": 16,
    "tileheight": 16,
    "tilecount": 64,
    "image": "terrain.png",
    "imagewidth": 128,
    "imageheight": 128,
    "margin": 0,
    "spacing": 0,
    "tiles": [
        {
            "id": 3,
            "animation": [
                {"tileid": 3, "duration": 100},
                {"tileid": 4, "duration": 150},
            ],
            "properties": [{"name": "solid", "type": "bool", "value": True}],
            "objectgroup": {
                "draworder": "index",
                "name": "",
                "objects": [
                    {"id": 1, "x": 0, "y": 8, "width": 16, "height": 8,
                     "rotation": 0, "visible": True},
                ],
                "opacity": 1,
                "type": "objectgroup",
                "visible": True,
                "x": 0,
                "y": 0,
            },
        },
    ],
    "wangsets": [
        {
            "name": "ground",
            "type": "corner",
            "tile": -1,
            "colors": [
                {"color": "#00ff00", "name": "grass", "probability": 1, "tile": -1},
            ],
            "wangtiles": [
                {"tileid": 0, "wangid": [0, 1, 0, 1, 0, 1, 0, 1]},
            ],
        },
    ],
}

TOWN_TILESET = {
    "name": "town",
    "type": "tileset",
    "columns": 4,
    "tilewidth": 32,
    "tileheight": 32,
    "tilecount": 16,
    "image": "town.png",
}

BASE_MAP = {
    "type": "map",
    "version": "1.10",
    "tiledversion": "1.10.2",
    "orientation": "orthogonal",
    "renderorder": "right-down",
    "compressionlevel": -1,
    "width": 3,
    "height": 2,
    "tilewidth": 16,
    "tileheight": 16,
    "infinite": False,
    "nextlayerid": 3,
    "nextobjectid": 2,
    "properties": [
        {"name": "helmslot", "type": "int", "value": 3},
    ],
    "tilesets": [
        {"firstgid": 1, "source": "terrain.tsx"},
        {"firstgid": 65, "source": "town.tsx"},
    ],
    "layers": [
        {
            "id": 1,
            "name": "Ground",
            "type": "tilelayer",
            "width": 3,
            "height": 2,
            "data": [1, 2, 3, 21, 0, 65],
            "opacity": 1,
            "visible": True,
            "x": 0,
            "y": 0,
        },
        {
            "id": 2,
            "name": "Spawns",
            "type": "objectgroup",
            "draworder": "topdown",
            "objects": [
                {
                    "id": 1,
                    "name": "fence",
                    "x": 16,
                    "y": 16,
                    "polyline": [{"x": 0, "y": 0}, {"x": 32, "y": 0}],
                    "text": {"text": "Hello", "wrap": True},
                    "properties": [{"name": "owner", "type": "object", "value": 7}],
                },
            ],
            "opacity": 1,
            "visible": True,
            "x": 0,
            "y": 0,
        },
    ],
}


def _encode_gids(gids):
    return base64.b64encode(struct.pack(f"<{len(gids)}I", *gids)).decode("ascii")


@pytest.fixture
def encode_gids():
    """GIDs -> base64 text of little-endian uint32s."""
    return _encode_gids


@pytest.fixture
def make_map():
    """Factory for map documents: a fresh copy of BASE_MAP with overrides."""
    def _make_map(**overrides):
        document = copy.deepcopy(BASE_MAP)
        document.update(overrides)
        return document
    return _make_map


@pytest.fixture
def map_dir(tmp_path):
    """Directory holding terrain.json and town.json."""
    (tmp_path / "terrain.json").write_text(json.dumps(TERRAIN_TILESET), encoding="utf-8")
    (tmp_path / "town.json").write_text(json.dumps(TOWN_TILESET), encoding="utf-8")
    return tmp_path


@pytest.fixture
def terrain_tileset_json():
    return json.dumps(TERRAIN_TILESET)
