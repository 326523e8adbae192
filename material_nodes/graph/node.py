import re
from abc import ABC, abstractmethod
from typing import Any, Dict, List, FrozenSet, Optional, Set, Tuple, TYPE_CHECKING

from ..config import RESERVED_WORDS
from ..errors import PinNotFoundError, UnknownNodeCapability
from ..ir.types import SType, FLOAT4
from .pin import Pin, PinKind

if TYPE_CHECKING:
    from .nodetree import NodeGraph
    from ..codegen.context import GenerationContext
    from ..codegen.variable_table import VariableTable


def sanitize_identifier(name: str) -> str:
    """Turn a display name into a valid identifier ("Base Color" -> "baseColor")."""
    parts = [p for p in re.split(r'[^a-zA-Z0-9]+', name) if p]
    if not parts:
        return "_"
    head = parts[0].lower() if parts[0].isupper() else parts[0][0].lower() + parts[0][1:]
    s = head + "".join(p[0].upper() + p[1:] for p in parts[1:])
    # Ensure it doesn't start with digit
    if s[0].isdigit():
        s = "_" + s
    return s


def _unique_parameter(name: str, used: Set[str], reserved: FrozenSet[str]) -> str:
    unique = name
    suffix = 0
    while unique in used or unique in reserved:
        unique = f"{name}{suffix}"
        suffix += 1
    used.add(unique)
    return unique


class Node(ABC):
    """
    Graph vertex contributing a value or a function to the compiled program.

    Variants implement two operations:
        initialize(graph)                 declare pins via add_or_get_pin
        define_method(context, table)     emit this node's contribution

    Declarative configuration lives in PROPERTIES (name -> default). Changing
    a property listed in `pin_properties` through NodeGraph.set_property
    re-runs initialize so the pin set follows the configuration.
    """
    type_name: str = "Node"
    PROPERTIES: Dict[str, Any] = {}
    pin_properties: Tuple[str, ...] = ()
    # Compiled as a root when compile_material() is given no roots
    is_output: bool = False

    def __init__(self, name: Optional[str] = None, id: int = 0, **properties):
        self.id = id
        self.name = name or self.type_name
        self.pins: Dict[Tuple[str, PinKind], Pin] = {}
        self.graph: Optional['NodeGraph'] = None
        self._declared: Optional[List[Tuple[str, PinKind]]] = None

        self.properties: Dict[str, Any] = dict(self.PROPERTIES)
        for key, value in properties.items():
            if key not in self.PROPERTIES:
                raise TypeError(f"{self.type_name} has no property '{key}'")
            self.properties[key] = value

    def __getattr__(self, item):
        # Properties read like attributes (node.mode); only called on misses
        props = self.__dict__.get('properties')
        if props is not None and item in props:
            return props[item]
        raise AttributeError(f"{type(self).__name__!s} has no attribute '{item}'")

    # -------------------------------------------------------------------------
    # Capability set
    # -------------------------------------------------------------------------

    @abstractmethod
    def initialize(self, graph: 'NodeGraph') -> None:
        """Create or re-attach this node's pins. Must be idempotent."""

    @abstractmethod
    def define_method(self, context: 'GenerationContext', table: 'VariableTable') -> None:
        """Emit this node's contribution and publish its output expressions."""

    # -------------------------------------------------------------------------
    # Pins
    # -------------------------------------------------------------------------

    def add_or_get_pin(self, candidate: Pin) -> Pin:
        """
        Return the existing pin with the candidate's name and kind, or add it.

        An existing pin with the same shape is returned unchanged together
        with its links. A pin whose type changed is replaced in place; links
        to the old pin are pruned by the graph.
        """
        key = candidate.key
        if self._declared is not None and key not in self._declared:
            self._declared.append(key)

        existing = self.pins.get(key)
        if existing is not None:
            if existing.same_shape(candidate):
                existing.default_expression = candidate.default_expression
                return existing
            self._replace_pin(existing, candidate)
            return candidate

        self.pins[key] = candidate
        candidate.node_id = self.id
        if self.graph is not None:
            self.graph._register_pin(self, candidate)
        return candidate

    def _replace_pin(self, old: Pin, new: Pin):
        if self.graph is not None:
            self.graph._unregister_pin(old)
        self.pins[old.key] = new
        new.node_id = self.id
        if self.graph is not None:
            self.graph._register_pin(self, new)

    def _remove_pin(self, pin: Pin):
        if self.graph is not None:
            self.graph._unregister_pin(pin)
        del self.pins[pin.key]

    def _reorder_pins(self, order: List[Tuple[str, PinKind]]):
        self.pins = {key: self.pins[key] for key in order if key in self.pins}

    @property
    def inputs(self) -> List[Pin]:
        return [p for p in self.pins.values() if p.kind == PinKind.INPUT]

    @property
    def outputs(self) -> List[Pin]:
        return [p for p in self.pins.values() if p.kind == PinKind.OUTPUT]

    def get_pin(self, name: str) -> Pin:
        """Pin called `name`; the input wins when an input and output share it."""
        pin = self.pins.get((name, PinKind.INPUT)) or self.pins.get((name, PinKind.OUTPUT))
        if pin is None:
            raise PinNotFoundError(f"Node '{self.name}' has no pin '{name}'", pin_name=name)
        return pin

    def get_input(self, name: str) -> Pin:
        pin = self.pins.get((name, PinKind.INPUT))
        if pin is None:
            raise PinNotFoundError(f"Node '{self.name}' has no input '{name}'", pin_name=name)
        return pin

    def get_output(self, name: str) -> Pin:
        pin = self.pins.get((name, PinKind.OUTPUT))
        if pin is None:
            raise PinNotFoundError(f"Node '{self.name}' has no output '{name}'", pin_name=name)
        return pin

    def describe(self) -> Dict[str, Any]:
        """Stable structural summary used for fingerprinting."""
        props = {}
        for key in sorted(self.properties):
            value = self.properties[key]
            props[key] = getattr(value, 'name', value)
        return {
            'type': self.type_name,
            'id': self.id,
            'name': self.name,
            'properties': props,
            'pins': [(p.id, p.name, p.kind.name, str(p.type), p.default_expression)
                     for p in self.pins.values()],
        }

    def __repr__(self):
        return f"{type(self).__name__}({self.name!r}, id={self.id})"


class FunctionNode(Node):
    """
    Node that registers a reusable named function and calls it.

    The call result becomes a local variable; the first output pin carries
    that variable downstream. Texture-typed inputs expand to a texture and
    a sampler parameter.
    """
    type_name = "FunctionNode"
    method_name: Optional[str] = None
    return_type: SType = FLOAT4
    includes: Tuple[str, ...] = ()

    def resolve_method_name(self, context: 'GenerationContext') -> Optional[str]:
        return self.method_name

    def get_return_type(self) -> SType:
        return self.return_type

    def get_includes(self) -> Tuple[str, ...]:
        return tuple(self.includes)

    def result_pin(self) -> Pin:
        outputs = self.outputs
        if not outputs:
            raise PinNotFoundError(f"Function node '{self.name}' has no output pin")
        return outputs[0]

    def parameters(self, reserved: FrozenSet[str] = RESERVED_WORDS) -> List[str]:
        """
        Declared parameters in input pin order.

        Names are unique within the method and never shadow `reserved`;
        clashes take a numeric suffix ("Min" -> min0).
        """
        params = []
        used: Set[str] = set()
        for pin in self.inputs:
            ident = _unique_parameter(sanitize_identifier(pin.name), used, reserved)
            params.append(pin.type.declare(ident))
            if pin.type.is_texture:
                sampler = _unique_parameter(f"{ident}Sampler", used, reserved)
                params.append(f"SamplerState {sampler}")
        return params

    def resolve_arguments(self, context: 'GenerationContext') -> List[str]:
        """Resolve every input exactly once, in parameter order."""
        args = []
        for pin in self.inputs:
            if pin.type.is_texture:
                binding = context.resolve_texture(pin)
                args.append(binding.texture_name)
                args.append(binding.sampler_name)
            else:
                args.append(context.resolve(pin))
        return args

    @abstractmethod
    def method_body(self, context: 'GenerationContext', table: 'VariableTable') -> str:
        """Body text of the registered function (without braces)."""

    def define_method(self, context: 'GenerationContext', table: 'VariableTable') -> None:
        name = self.resolve_method_name(context)
        if not name:
            raise UnknownNodeCapability(
                f"Function node '{self.name}' supplies no method name",
                node_id=self.id, node_name=self.name)

        for path in self.get_includes():
            table.add_include(path)

        args = self.resolve_arguments(context)
        return_type = self.get_return_type()
        table.add_method(name, self.parameters(table.settings.reserved_words), return_type,
                         self.method_body(context, table), owner=self)

        var = context.add_variable(self, return_type, f"{name}({', '.join(args)})")
        context.set_output(self.result_pin(), var)
