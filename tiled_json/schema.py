"""
Declarative structural decoding of JSON objects into dataclasses

=============================================================================
HOW IT WORKS
=============================================================================

Every entity of the document model is a plain dataclass. The dataclass
itself is the schema:

    @dataclass
    class TilesetRef:
        first_gid: int = 0          # JSON key "firstgid"
        source: str = ""            # JSON key "source"

decode() walks the dataclass fields, finds the matching JSON key and
converts the value according to the field's type hint:

    int, float, str, bool   -> checked scalars
    Any                     -> raw JSON value, kept as is
    Optional[T]             -> None or T
    List[T], Dict[str, T]   -> converted element by element
    Enum subclasses         -> through enums.parse_enum()
    dataclasses             -> decoded recursively

=============================================================================
KEY MATCHING
=============================================================================

Tiled writes keys in lowercase without separators ("firstgid",
"tiledversion", "wangsets"). Custom class members keep whatever the user
typed ("hit_points"). Keys and field names are both compared lowercased with
the underscores removed, so "firstgid" finds first_gid and "hit_points"
finds hit_points. A field can declare another key with json_field(key=...),
and json_field(decode=False) keeps a derived field out of decoding.

Keys the dataclass does not know are ignored. Missing keys and JSON null
leave the field default in place.
"""

import dataclasses
import typing
from enum import Enum
from typing import Any, Dict, Type, TypeVar, Union

from .enums import parse_enum
from .errors import MalformedDocument


T = TypeVar('T')

_hints_cache: Dict[type, Dict[str, Any]] = {}


def json_field(key: str = None, *, decode: bool = True, **kwargs):
    """dataclasses.field() with an explicit JSON key or decoding switched off."""
    metadata = dict(kwargs.pop('metadata', None) or {})
    if key is not None:
        metadata['json'] = key
    metadata['decode'] = decode
    return dataclasses.field(metadata=metadata, **kwargs)


def normalize_key(key) -> str:
    return str(key).replace('_', '').lower()


def json_key(f: dataclasses.Field) -> str:
    return normalize_key(f.metadata.get('json', f.name))


def _type_hints(cls: type) -> Dict[str, Any]:
    hints = _hints_cache.get(cls)
    if hints is None:
        hints = typing.get_type_hints(cls)
        _hints_cache[cls] = hints
    return hints


def _type_name(tp) -> str:
    return getattr(tp, '__name__', None) or str(tp)


def _mismatch(where: str, expected: str, value) -> MalformedDocument:
    return MalformedDocument(
        f"{where}: expected {expected}, got {type(value).__name__} {value!r}"
    )


def convert(tp, value, where: str = "value"):
    """Convert a decoded JSON value into the Python type tp."""
    if tp is Any:
        return value

    origin = typing.get_origin(tp)
    args = typing.get_args(tp)

    if origin is Union:
        if value is None:
            return None
        members = [arg for arg in args if arg is not type(None)]
        if len(members) != 1:
            raise MalformedDocument(f"{where}: unsupported union {tp}")
        return convert(members[0], value, where)

    if origin is list or tp is list:
        if not isinstance(value, list):
            raise _mismatch(where, "an array", value)
        item_type = args[0] if args else Any
        return [convert(item_type, item, f"{where}[{i}]") for i, item in enumerate(value)]

    if origin is dict or tp is dict:
        if not isinstance(value, dict):
            raise _mismatch(where, "an object", value)
        item_type = args[1] if args else Any
        return {k: convert(item_type, v, f"{where}.{k}") for k, v in value.items()}

    if isinstance(tp, type) and issubclass(tp, Enum):
        return parse_enum(tp, value)

    if dataclasses.is_dataclass(tp):
        return decode(tp, value, where)

    # bool is an int subclass, check it first and keep it out of numbers
    if tp is bool:
        if isinstance(value, bool):
            return value
        raise _mismatch(where, "a boolean", value)

    if tp is int:
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        if isinstance(value, float) and value.is_integer():
            return int(value)
        raise _mismatch(where, "an integer", value)

    if tp is float:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return float(value)
        raise _mismatch(where, "a number", value)

    if tp is str:
        if isinstance(value, str):
            return value
        raise _mismatch(where, "a string", value)

    raise MalformedDocument(f"{where}: no conversion to {_type_name(tp)}")


def decode(cls: Type[T], value, where: str = None) -> T:
    """
    Build a cls instance from a decoded JSON object.

    Parameters:
    -----------
    cls : dataclass type
        Target entity; fields without a default must be present
    value : dict
        Output of json.loads() for this entity
    where : str
        Location used in error messages (defaults to the class name)

    Raises:
    -------
    MalformedDocument : value is not an object or a field has the wrong shape
    InvalidEnumValue : an enum field holds an unknown token
    """
    where = where or cls.__name__
    if not isinstance(value, dict):
        raise _mismatch(where, "an object", value)

    # The last spelling of a key wins
    by_key = {normalize_key(k): v for k, v in value.items()}
    hints = _type_hints(cls)

    kwargs = {}
    for f in dataclasses.fields(cls):
        if not f.init or not f.metadata.get('decode', True):
            continue
        key = json_key(f)
        raw = by_key.get(key)
        if raw is None:
            continue
        kwargs[f.name] = convert(hints[f.name], raw, f"{where}.{key}")

    try:
        return cls(**kwargs)
    except TypeError as e:
        # A field without a default that the object does not provide
        raise MalformedDocument(f"{where}: {e}") from e
