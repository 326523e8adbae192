from enum import Enum, auto
from dataclasses import dataclass
from typing import List, Optional

from ..ir.types import SType, PinType, can_coerce

class PinKind(Enum):
    INPUT = auto()
    OUTPUT = auto()

@dataclass(frozen=True)
class Link:
    """
    Directed edge from a producing output pin to a consuming input pin.

    Stored as pin ids so the graph, not the link, owns lifetimes.
    """
    id: int
    output_id: int
    input_id: int

class Pin:
    """
    Typed port on a node.

    Pins are created by nodes during initialize() and registered with the
    graph, which assigns the id. An unassigned pin has id 0.
    """
    def __init__(self, name: str, kind: PinKind, type: SType,
                 default_expression: Optional[str] = None, id: int = 0):
        if isinstance(type, PinType):
            type = SType(type)
        self.id = id
        self.name = name
        self.kind = kind
        self.type = type
        self.default_expression = default_expression
        self.node_id: Optional[int] = None
        self.links: List[Link] = []

    @property
    def key(self):
        """Identity on its node: an input and an output may share a name."""
        return (self.name, self.kind)

    @property
    def arity(self) -> int:
        return self.type.arity

    @property
    def is_input(self) -> bool:
        return self.kind == PinKind.INPUT

    @property
    def is_output(self) -> bool:
        return self.kind == PinKind.OUTPUT

    @property
    def is_linked(self) -> bool:
        return bool(self.links)

    def same_shape(self, other: 'Pin') -> bool:
        """True if `other` declares the same name, kind and type."""
        return (self.name == other.name and self.kind == other.kind
                and self.type == other.type)

    def accepts(self, source: 'Pin') -> bool:
        """True if this input pin can consume values from `source`."""
        return can_coerce(source.type, self.type)

    def __repr__(self):
        return f"Pin({self.name!r}, {self.kind.name}, {self.type}, id={self.id})"

def input_pin(name: str, type, default: Optional[str] = None) -> Pin:
    return Pin(name, PinKind.INPUT, type, default_expression=default)

def output_pin(name: str, type) -> Pin:
    return Pin(name, PinKind.OUTPUT, type)
