"""
Tile layer payload decoding

=============================================================================
DATA ENCODINGS
=============================================================================

A tile layer (or a chunk of an infinite layer) stores its GIDs in the
"data" key, in one of two shapes selected by the layer's "encoding":

1. CSV (encoding "csv" or absent):
   "data": [1, 2, 3, 4, 0, 0, 7, 8]
   A plain JSON array, nothing to decode.

2. Base64 (encoding "base64"):
   "data": "AQAAAAIAAAADAAAABAAAAA=="
   Binary data, every 4 bytes one little-endian uint32, row-major.
   Optionally compressed with zlib, gzip or zstd ("compression" key).

=============================================================================
COMPRESSION
=============================================================================

Decompression is not implemented. A compressed payload is rejected with
UnsupportedCompression instead of being reinterpreted as raw bytes.

=============================================================================
INTERNAL STORAGE
=============================================================================

Decoded tiles are an array.array('I') of unsigned 32-bit ints, 4 bytes per
tile. Index calculation: data[y * width + x]
"""

import array
import base64
import binascii
import sys
from typing import Any

from .errors import MalformedLayerData, UnsupportedCompression, UnsupportedEncoding


CSV_ENCODINGS = ("", "csv")
BASE64_ENCODING = "base64"

_UINT32_MAX = 0xFFFFFFFF


def decode_csv(raw: Any) -> array.array:
    """Copy an inline JSON array of GIDs into a uint32 array."""
    if not isinstance(raw, list):
        raise MalformedLayerData(
            f"CSV layer data must be an array, got {type(raw).__name__}"
        )

    for i, gid in enumerate(raw):
        if isinstance(gid, bool) or not isinstance(gid, int) or not 0 <= gid <= _UINT32_MAX:
            raise MalformedLayerData(f"Invalid GID {gid!r} at index {i}")

    return array.array('I', raw)


def decode_base64(raw: Any) -> array.array:
    """Decode uncompressed base64 text into a uint32 array."""
    if not isinstance(raw, str):
        raise MalformedLayerData(
            f"Base64 layer data must be a string, got {type(raw).__name__}"
        )

    try:
        raw_data = base64.b64decode(raw.strip(), validate=True)
    except binascii.Error as e:
        raise MalformedLayerData(f"Invalid base64 layer data: {e}") from e

    if len(raw_data) % 4:
        raise MalformedLayerData(
            f"Base64 layer data is {len(raw_data)} bytes, not a multiple of 4"
        )

    tiles = array.array('I')
    tiles.frombytes(raw_data)
    # Payload is little-endian whatever the host is
    if sys.byteorder == 'big':
        tiles.byteswap()
    return tiles


def decode_layer_data(raw: Any, encoding: str = "", compression: str = "",
                      compression_level: int = -1) -> array.array:
    """
    Decode a layer or chunk payload into GIDs.

    Parameters:
    -----------
    raw : list or str
        The "data" value exactly as found in the JSON document
    encoding : str
        "", "csv" or "base64"
    compression : str
        "" or one of zlib, gzip, zstd (base64 only)
    compression_level : int
        The map's compressionlevel, reported in UnsupportedCompression

    Returns:
    --------
    array.array('I') : GIDs in row-major order

    Raises:
    -------
    UnsupportedEncoding : encoding is neither csv nor base64
    UnsupportedCompression : base64 payload is compressed
    MalformedLayerData : payload has the wrong shape for its encoding
    """
    encoding = encoding or ""
    compression = compression or ""

    if encoding in CSV_ENCODINGS:
        return decode_csv(raw)

    if encoding == BASE64_ENCODING:
        if compression:
            # zlib/gzip/zstd are recognised but not supported, anything else too
            raise UnsupportedCompression(compression, compression_level)
        return decode_base64(raw)

    raise UnsupportedEncoding(encoding)
