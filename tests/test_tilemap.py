import json
import os

import pytest

import tiled_json.tilemap
from tiled_json import (
    OrientationType, RenderOrderType, StaggerAxisType, StaggerIndexType,
    Rect, load_map, load_map_file,
)
from tiled_json.errors import (
    DivisionByZeroColumns, InvalidEnumValue, MalformedDocument,
    NoOwningTileset, TilesetLoadFailure,
)


# =============================================================================
# LOADING
# =============================================================================

def test_map_header(make_map):
    tile_map = load_map(json.dumps(make_map()))

    assert tile_map.type == "map"
    assert tile_map.version == "1.10"
    assert tile_map.tiled_version == "1.10.2"
    assert tile_map.orientation is OrientationType.ORTHOGONAL
    assert tile_map.render_order is RenderOrderType.RIGHT_DOWN
    assert (tile_map.width, tile_map.height) == (3, 2)
    assert (tile_map.tile_width, tile_map.tile_height) == (16, 16)
    assert tile_map.compression_level == -1
    assert tile_map.next_layer_id == 3
    assert tile_map.stagger_axis is None


def test_defaults_for_missing_keys():
    tile_map = load_map("{}")

    assert tile_map.render_order is RenderOrderType.RIGHT_DOWN
    assert tile_map.compression_level == -1
    assert tile_map.layers == []
    assert tile_map.tilesets == []


def test_keys_are_case_insensitive_and_unknown_keys_ignored():
    tile_map = load_map(json.dumps({
        "Width": 5, "TILEWIDTH": 8, "RenderOrder": "left-up", "editorsettings": {"x": 1},
    }))

    assert tile_map.width == 5
    assert tile_map.tile_width == 8
    assert tile_map.render_order is RenderOrderType.LEFT_UP


def test_stagger_fields(make_map):
    document = make_map(orientation="staggered", staggeraxis="y", staggerindex="odd")
    tile_map = load_map(json.dumps(document))

    assert tile_map.orientation is OrientationType.STAGGERED
    assert tile_map.stagger_axis is StaggerAxisType.Y
    assert tile_map.stagger_index is StaggerIndexType.ODD


def test_objects(make_map):
    tile_map = load_map(json.dumps(make_map()))
    spawns = tile_map.get_layer_by_name("Spawns")
    fence = spawns.objects[0]

    assert spawns.draw_order == "topdown"
    assert fence.name == "fence"
    assert [(p.x, p.y) for p in fence.polyline] == [(0, 0), (32, 0)]
    assert fence.polygon == []
    assert fence.text.text == "Hello"
    assert fence.text.wrap is True
    assert fence.text.font_family == "sans-serif"
    assert fence.get_property("owner").get(int) == 7


@pytest.mark.parametrize("content", ["{not json", "[1, 2]", "null", ""])
def test_malformed_json(content):
    with pytest.raises(MalformedDocument):
        load_map(content)


def test_malformed_json_keeps_cause():
    with pytest.raises(MalformedDocument) as excinfo:
        load_map("{not json")
    assert isinstance(excinfo.value.__cause__, json.JSONDecodeError)


@pytest.mark.parametrize("overrides", [
    {"version": 1.2},
    {"width": "wide"},
    {"layers": {"id": 1}},
    {"tilesets": [1]},
    {"width": -1},
])
def test_wrong_shapes(make_map, overrides):
    with pytest.raises(MalformedDocument):
        load_map(json.dumps(make_map(**overrides)))


def test_bad_enum_token(make_map):
    with pytest.raises(InvalidEnumValue) as excinfo:
        load_map(json.dumps(make_map(renderorder="bogus-token")))
    assert excinfo.value.enum_name == "RenderOrderType"


def test_tileset_source_rewritten_under_base_directory(make_map):
    tile_map = load_map(json.dumps(make_map()), "tests")

    assert tile_map.tilesets[1].source == os.path.join("tests", "town.json")
    assert tile_map.tilesets[0].source == os.path.join("tests", "terrain.json")


def test_tileset_source_rewrite_drops_directories(make_map):
    document = make_map(tilesets=[{"firstgid": 1, "source": "../tilesets/town.tsx"}])
    tile_map = load_map(json.dumps(document), "maps")

    assert tile_map.tilesets[0].source == os.path.join("maps", "town.json")


def test_tileset_source_kept_without_base_directory(make_map):
    tile_map = load_map(json.dumps(make_map()))
    assert tile_map.tilesets[1].source == "town.tsx"


def test_load_map_file_uses_map_directory(map_dir, make_map):
    path = map_dir / "town_map.json"
    path.write_text(json.dumps(make_map()), encoding="utf-8")

    tile_map = load_map_file(path)

    assert tile_map.tilesets[0].source == os.path.join(str(map_dir), "terrain.json")
    assert tile_map.get_tileset(1).name == "terrain"


# =============================================================================
# GID RESOLUTION
# =============================================================================

def _three_tilesets(make_map):
    document = make_map(tilesets=[
        {"firstgid": 65, "source": "town.tsx"},
        {"firstgid": 1, "source": "terrain.tsx"},
        {"firstgid": 129, "source": "people.tsx"},
    ])
    return load_map(json.dumps(document))


@pytest.mark.parametrize("gid,first_gid", [
    (1, 1), (64, 1), (65, 65), (128, 65), (129, 129), (5000, 129),
])
def test_tightest_lower_bound(make_map, gid, first_gid):
    tile_map = _three_tilesets(make_map)

    assert tile_map.get_tileset_ref(gid).first_gid == first_gid
    # Same answer on the already sorted list
    assert tile_map.get_tileset_ref(gid).first_gid == first_gid


def test_resolution_sorts_tilesets_in_place(make_map):
    tile_map = _three_tilesets(make_map)
    assert [ref.first_gid for ref in tile_map.tilesets] == [65, 1, 129]

    tile_map.get_tileset_ref(70)

    assert [ref.first_gid for ref in tile_map.tilesets] == [129, 65, 1]


def test_local_id(make_map):
    tile_map = _three_tilesets(make_map)
    assert tile_map.get_local_id(70) == 5
    assert tile_map.get_local_id(1) == 0


def test_gid_below_every_tileset(make_map):
    tile_map = _three_tilesets(make_map)
    with pytest.raises(NoOwningTileset) as excinfo:
        tile_map.get_tileset_ref(0)
    assert excinfo.value.gid == 0


def test_no_tilesets(make_map):
    tile_map = load_map(json.dumps(make_map(tilesets=[])))
    with pytest.raises(NoOwningTileset):
        tile_map.get_tileset_ref(1)
    with pytest.raises(NoOwningTileset):
        tile_map.get_tileset(1)


def test_tile_rect(make_map, map_dir):
    tile_map = load_map(json.dumps(make_map()), map_dir)

    assert tile_map.get_tile_rect(21) == Rect(64, 32, 16, 16)
    assert tile_map.get_tile_rect(1) == Rect(0, 0, 16, 16)
    # town: 4 columns of 32x32, firstgid 65
    assert tile_map.get_tile_rect(70) == Rect(32, 32, 32, 32)


def test_rect_is_immutable():
    rect = Rect(1, 2, 3, 4)
    with pytest.raises(AttributeError):
        rect.x = 10


def test_tile_rect_with_zero_columns(make_map, tmp_path):
    (tmp_path / "terrain.json").write_text(json.dumps({"name": "broken", "columns": 0}))
    tile_map = load_map(json.dumps(make_map()), tmp_path)

    with pytest.raises(DivisionByZeroColumns):
        tile_map.get_tile_rect(5)


# =============================================================================
# TILESET CACHE
# =============================================================================

@pytest.fixture
def count_loads(monkeypatch):
    """Counts calls to the tileset file loader used by TileMap."""
    calls = []
    original = tiled_json.tilemap.load_tileset_file

    def counting_load(path):
        calls.append(path)
        return original(path)

    monkeypatch.setattr(tiled_json.tilemap, "load_tileset_file", counting_load)
    return calls


def test_cache_hit_returns_same_instance(make_map, map_dir, count_loads):
    tile_map = load_map(json.dumps(make_map()), map_dir)

    first = tile_map.get_tileset(5)
    second = tile_map.get_tileset(5)

    assert second is first
    assert len(count_loads) == 1


def test_force_reload_reads_file_again(make_map, map_dir, count_loads):
    tile_map = load_map(json.dumps(make_map()), map_dir)
    first = tile_map.get_tileset(5)

    (map_dir / "terrain.json").write_text(json.dumps({"name": "repainted", "columns": 8}))
    reloaded = tile_map.get_tileset(5, force_reload=True)

    assert len(count_loads) == 2
    assert reloaded is not first
    assert reloaded.name == "repainted"
    assert tile_map.get_tileset(5) is reloaded


def test_cache_is_keyed_by_gid(make_map, map_dir, count_loads):
    tile_map = load_map(json.dumps(make_map()), map_dir)

    a = tile_map.get_tileset(5)
    b = tile_map.get_tileset(6)

    # Same file, two entries and two reads
    assert len(count_loads) == 2
    assert a == b
    assert a is not b


def test_missing_tileset_file(make_map, tmp_path):
    tile_map = load_map(json.dumps(make_map()), tmp_path)

    with pytest.raises(TilesetLoadFailure) as excinfo:
        tile_map.get_tileset(1)

    assert excinfo.value.source == os.path.join(str(tmp_path), "terrain.json")
    assert isinstance(excinfo.value.__cause__, FileNotFoundError)


def test_unparsable_tileset_file(make_map, tmp_path):
    (tmp_path / "terrain.json").write_text("{broken")
    tile_map = load_map(json.dumps(make_map()), tmp_path)

    with pytest.raises(TilesetLoadFailure) as excinfo:
        tile_map.get_tileset(1)
    assert isinstance(excinfo.value.__cause__, MalformedDocument)


def test_tileset_file_not_utf8(make_map, tmp_path):
    (tmp_path / "terrain.json").write_bytes(b'{"name": "\xff\xfe"}')
    tile_map = load_map(json.dumps(make_map()), tmp_path)

    with pytest.raises(TilesetLoadFailure) as excinfo:
        tile_map.get_tileset(1)
    assert isinstance(excinfo.value.__cause__, UnicodeDecodeError)


def test_embedded_tileset(make_map, tmp_path):
    document = make_map(tilesets=[{
        "firstgid": 1, "name": "inline", "columns": 4, "tilewidth": 8,
        "tileheight": 8, "tilecount": 16, "image": "inline.png",
    }])
    tile_map = load_map(json.dumps(document), tmp_path)
    ref = tile_map.tilesets[0]

    assert ref.source == ""
    assert ref.tileset.name == "inline"
    assert ref.tileset.first_gid == 1
    assert tile_map.get_tileset(6) is ref.tileset
    assert tile_map.get_tile_rect(6) == Rect(8, 8, 8, 8)
