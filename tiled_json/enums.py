"""
Map enumerations and the token codec that reads them

Tiled writes enumerated attributes as lowercase, hyphen separated tokens:

    "orientation": "orthogonal"
    "renderorder": "right-down"
    "staggeraxis": "y"

parse_enum() turns such a token into a member of the requested Enum by
building the PascalCase name of the token ("right-down" -> "RightDown") and
comparing it with the PascalCase form of each member name
(RIGHT_DOWN -> "RightDown"). The codec is read only; nothing writes tokens
back out.
"""

from enum import Enum
from typing import Dict, Type, TypeVar

from .errors import InvalidEnumValue


E = TypeVar('E', bound=Enum)


class OrientationType(Enum):
    ORTHOGONAL = "orthogonal"
    ISOMETRIC = "isometric"
    STAGGERED = "staggered"
    HEXAGONAL = "hexagonal"


class RenderOrderType(Enum):
    """
    Corner the renderer starts from.

    Only orthogonal maps honour anything but right-down.
    """
    RIGHT_DOWN = "right-down"
    RIGHT_UP = "right-up"
    LEFT_DOWN = "left-down"
    LEFT_UP = "left-up"


class StaggerAxisType(Enum):
    X = "x"
    Y = "y"


class StaggerIndexType(Enum):
    ODD = "odd"
    EVEN = "even"


def _capitalize(word: str) -> str:
    # Only the first letter changes: "rIGHT" stays "RIGHT"
    if not word:
        return word
    return word[0].upper() + word[1:]


def pascal_name(token: str) -> str:
    """'right-down' -> 'RightDown'"""
    return "".join(_capitalize(part) for part in token.split('-'))


def _member_names(enum_cls: Type[E]) -> Dict[str, E]:
    return {
        "".join(part.capitalize() for part in member.name.split('_')): member
        for member in enum_cls
    }


def parse_enum(enum_cls: Type[E], token) -> E:
    """
    Convert a hyphenated token into a member of enum_cls.

    Parameters:
    -----------
    enum_cls : Enum subclass
        Target enumeration
    token : str
        Token as written in the JSON document

    Raises:
    -------
    InvalidEnumValue : token is not a string or names no member
    """
    if not isinstance(token, str):
        raise InvalidEnumValue(token, enum_cls.__name__)

    member = _member_names(enum_cls).get(pascal_name(token))
    if member is None:
        raise InvalidEnumValue(token, enum_cls.__name__)
    return member
