"""
Exceptions raised while loading Tiled JSON documents and resolving tiles

Every error derives from TiledJsonError so callers can catch the whole
family at once:

    try:
        tile_map = load_map(text, "maps")
        rect = tile_map.get_tile_rect(gid)
    except TiledJsonError as e:
        print(f"Error: {e}")

Errors that wrap a lower level failure (json, I/O, base64) keep it as
__cause__ via ``raise ... from``.
"""

from typing import Optional


class TiledJsonError(Exception):
    """Base class for all tiled_json errors."""


# =============================================================================
# DOCUMENT ERRORS
# =============================================================================

class MalformedDocument(TiledJsonError):
    """The JSON text, or a value inside it, does not fit the document model."""


class InvalidEnumValue(TiledJsonError):
    """A hyphenated token has no matching enum member."""

    def __init__(self, token, enum_name: str):
        self.token = token
        self.enum_name = enum_name
        super().__init__(f"Failed to convert to enum: {enum_name} with value `{token}`")


class ValueShapeMismatch(TiledJsonError):
    """A property value cannot be interpreted as the requested type."""

    def __init__(self, name: str, target: str, reason: str = ""):
        self.name = name
        self.target = target
        message = f"Property '{name}' cannot be read as {target}"
        if reason:
            message += f": {reason}"
        super().__init__(message)


# =============================================================================
# LAYER DATA ERRORS
# =============================================================================

class UnsupportedEncoding(TiledJsonError):
    def __init__(self, encoding: str):
        self.encoding = encoding
        super().__init__(f"Unsupported layer encoding {encoding}")


class UnsupportedCompression(TiledJsonError):
    """Compressed base64 payloads are recognised but never decompressed."""

    def __init__(self, compression: str, level: int):
        self.compression = compression
        self.level = level
        super().__init__(f"Unsupported compression {compression} {level}")


class MalformedLayerData(TiledJsonError):
    pass


# =============================================================================
# RESOLUTION ERRORS
# =============================================================================

class NoOwningTileset(TiledJsonError):
    def __init__(self, gid: int):
        self.gid = gid
        super().__init__(f"No tileset owns GID {gid}")


class DivisionByZeroColumns(TiledJsonError):
    def __init__(self, gid: int, tileset_name: str = ""):
        self.gid = gid
        self.tileset_name = tileset_name
        super().__init__(
            f"Tileset '{tileset_name}' has 0 columns, cannot locate GID {gid}"
        )


class TilesetLoadFailure(TiledJsonError):
    """An external tileset could not be read or parsed."""

    def __init__(self, source: str, reason: Optional[str] = None):
        self.source = source
        message = f"Failed to load tileset {source}"
        if reason:
            message += f": {reason}"
        super().__init__(message)
