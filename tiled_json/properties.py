"""
Custom properties attached to maps, layers, tilesets, tiles and objects

=============================================================================
LATE TYPED VALUES
=============================================================================

In the JSON format a property looks like:

    {"name": "solid",    "type": "bool",   "value": true}
    {"name": "damage",   "type": "int",    "value": 10}
    {"name": "door",     "type": "object", "value": 12}
    {"name": "stats",    "type": "class",  "propertytype": "Stats",
     "value": {"hp": 30, "speed": 1.5}}

The value is kept exactly as json.loads() produced it (None, bool, int,
float, str, list or dict). Property.get(T) converts it on demand:

    prop.get(int)        -> 10
    prop.get(Stats)      -> Stats(hp=30, speed=1.5)   (Stats is a dataclass)

The "type" attribute is what Tiled says the value is. It is kept for the
caller and never checked against the actual value.
"""

from dataclasses import dataclass
from typing import Any, List, Optional, Type, TypeVar

from .errors import InvalidEnumValue, MalformedDocument, ValueShapeMismatch
from .schema import convert


T = TypeVar('T')


@dataclass
class Property:
    name: str = ""                       # Property name (key)
    type: str = ""                       # string, int, float, bool, color, file, object, class
    property_type: Optional[str] = None  # Custom class name for "class" properties
    value: Any = None                    # Raw JSON value

    def get(self, cls: Type[T]) -> T:
        """
        Interpret the value as cls.

        Dataclasses are decoded field by field with case-insensitive keys,
        scalars are checked (an integral float is accepted as int, an int
        as float, bool never counts as a number).

        Raises:
        -------
        ValueShapeMismatch : the value cannot be read as cls
        """
        target = getattr(cls, '__name__', str(cls))
        try:
            return convert(cls, self.value, self.name or "value")
        except (MalformedDocument, InvalidEnumValue) as e:
            raise ValueShapeMismatch(self.name, target, str(e)) from e


def find_property(properties: List[Property], name: str) -> Optional[Property]:
    """First property called name, or None. Names are unique only by convention."""
    for prop in properties:
        if prop.name == name:
            return prop
    return None
