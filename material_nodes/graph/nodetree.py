"""
NodeGraph - arena owning the nodes, pins and links of one material graph.

Nodes and pins are keyed by integer ids issued by the graph's own
IdGenerator; links reference pins by id. The graph is the only place that
creates or destroys links, so removing a pin or node can always prune every
link touching it.
"""

import json
import hashlib
import logging
from typing import Dict, Iterator, List, Optional, Type, TypeVar

from ..errors import (
    GraphError, InvalidLinkError, NodeNotFoundError, PinNotFoundError, TypeMismatchError,
)
from .node import Node
from .pin import Link, Pin, PinKind

logger = logging.getLogger(__name__)

N = TypeVar('N', bound=Node)


class IdGenerator:
    """
    Monotonic id counter scoped to one graph session.

    Ids start at 1; 0 means "unassigned". Externally supplied ids (from a
    loader) are reserved so later allocations never collide with them.
    """

    def __init__(self, start: int = 1):
        self._start = start
        self._next = start

    def next_id(self) -> int:
        value = self._next
        self._next += 1
        return value

    def reserve(self, value: int) -> int:
        if value >= self._next:
            self._next = value + 1
        return value

    def reset(self) -> None:
        self._next = self._start

    @property
    def current(self) -> int:
        return self._next


class NodeGraph:
    """
    Container for a material node graph.

    Example:
        graph = NodeGraph("Brick")
        tex = graph.add_node(TextureFileNode(path="bricks.dds"))
        nrm = graph.add_node(NormalMapNode())
        graph.link(tex.get_output("Color"), nrm.get_input("Color"))
    """

    def __init__(self, name: str = "Material"):
        self.name = name
        self.ids = IdGenerator()
        self._nodes: Dict[int, Node] = {}
        self._pins: Dict[int, Pin] = {}
        self._links: Dict[int, Link] = {}

    # -------------------------------------------------------------------------
    # Nodes
    # -------------------------------------------------------------------------

    def add_node(self, node: N) -> N:
        """Add a node, assign (or reserve) its id and run initialize()."""
        if node.id:
            if node.id in self._nodes:
                raise GraphError(f"Node id {node.id} already in graph '{self.name}'")
            self.ids.reserve(node.id)
        else:
            node.id = self.ids.next_id()
        node.graph = self
        self._nodes[node.id] = node

        # Pins constructed before the node joined the graph
        for pin in list(node.pins.values()):
            self._register_pin(node, pin)

        try:
            self.initialize_node(node)
        except Exception:
            # Invalid configuration: leave the graph as it was
            self.remove_node(node)
            raise
        logger.debug(f"Added node {node.name} (#{node.id})")
        return node

    def remove_node(self, node: Node) -> None:
        """Detach all pins of `node` and prune every link touching them."""
        if self._nodes.get(node.id) is not node:
            raise NodeNotFoundError(f"Node '{node.name}' is not in graph '{self.name}'", node.id)
        for pin in list(node.pins.values()):
            self._unregister_pin(pin)
        node.pins.clear()
        del self._nodes[node.id]
        node.graph = None
        logger.debug(f"Removed node {node.name} (#{node.id})")

    def initialize_node(self, node: Node) -> None:
        """
        Run initialize() and drop pins it no longer declares.

        Pins that are re-declared with the same shape keep their ids and
        links; replaced or dropped pins lose their links, leaving the other
        endpoint unconnected. Surviving pins follow declaration order.
        """
        node._declared = []
        try:
            node.initialize(self)
            declared = node._declared
        finally:
            node._declared = None

        for pin in list(node.pins.values()):
            if pin.key not in declared:
                logger.debug(f"Dropping stale pin {pin.name} from {node.name}")
                node._remove_pin(pin)
        node._reorder_pins(declared)

    def set_property(self, node: Node, name: str, value) -> None:
        """
        Set a declarative property; rebuild pins if the property shapes them.

        A value that initialize() rejects is rolled back and the previous
        pin set restored before the error propagates.
        """
        if name not in node.properties:
            raise TypeError(f"{node.type_name} has no property '{name}'")
        previous = node.properties[name]
        node.properties[name] = value
        if name not in node.pin_properties:
            return
        try:
            self.initialize_node(node)
        except Exception:
            node.properties[name] = previous
            self.initialize_node(node)
            raise

    def get_node(self, node_id: int) -> Node:
        node = self._nodes.get(node_id)
        if node is None:
            raise NodeNotFoundError(f"No node with id {node_id} in graph '{self.name}'", node_id)
        return node

    def find_nodes(self, node_type: Type[N]) -> List[N]:
        return [n for n in self._nodes.values() if isinstance(n, node_type)]

    @property
    def nodes(self) -> List[Node]:
        return list(self._nodes.values())

    def __iter__(self) -> Iterator[Node]:
        return iter(list(self._nodes.values()))

    def __len__(self) -> int:
        return len(self._nodes)

    # -------------------------------------------------------------------------
    # Pins
    # -------------------------------------------------------------------------

    def _register_pin(self, node: Node, pin: Pin) -> None:
        if pin.id and pin.id in self._pins and self._pins[pin.id] is not pin:
            raise GraphError(f"Pin id {pin.id} already in graph '{self.name}'")
        if pin.id:
            self.ids.reserve(pin.id)
        else:
            pin.id = self.ids.next_id()
        pin.node_id = node.id
        self._pins[pin.id] = pin

    def _unregister_pin(self, pin: Pin) -> None:
        for link in list(pin.links):
            self.remove_link(link)
        self._pins.pop(pin.id, None)

    def get_pin(self, pin_id: int) -> Pin:
        pin = self._pins.get(pin_id)
        if pin is None:
            raise PinNotFoundError(f"No pin with id {pin_id} in graph '{self.name}'", pin_id=pin_id)
        return pin

    def node_of(self, pin: Pin) -> Node:
        return self.get_node(pin.node_id)

    # -------------------------------------------------------------------------
    # Links
    # -------------------------------------------------------------------------

    def link(self, output: Pin, input: Pin) -> Link:
        """
        Connect `output` to `input`.

        Raises TypeMismatchError when the types are incompatible. An input
        holds a single link: an existing link on `input` is replaced.
        """
        if output.kind != PinKind.OUTPUT or input.kind != PinKind.INPUT:
            raise InvalidLinkError(
                f"Links run from an output to an input, got {output.kind.name} -> {input.kind.name}")
        if self._pins.get(output.id) is not output or self._pins.get(input.id) is not input:
            raise PinNotFoundError("Both pins must belong to this graph")
        if output.node_id == input.node_id:
            raise InvalidLinkError(f"Cannot link node #{output.node_id} to itself")
        if not input.accepts(output):
            raise TypeMismatchError(
                f"Cannot link {output.type} '{output.name}' to {input.type} '{input.name}'",
                output_type=output.type, input_type=input.type)

        for existing in list(input.links):
            if existing.output_id == output.id:
                return existing
            self.remove_link(existing)

        link = Link(self.ids.next_id(), output.id, input.id)
        self._links[link.id] = link
        output.links.append(link)
        input.links.append(link)
        return link

    def add_link(self, output: Pin, input: Pin) -> Link:
        return self.link(output, input)

    def remove_link(self, link: Link) -> None:
        self._links.pop(link.id, None)
        for pin_id in (link.output_id, link.input_id):
            pin = self._pins.get(pin_id)
            if pin is not None and link in pin.links:
                pin.links.remove(link)

    def links_of(self, pin: Pin) -> List[Link]:
        return list(pin.links)

    @property
    def links(self) -> List[Link]:
        return list(self._links.values())

    # -------------------------------------------------------------------------
    # Identity
    # -------------------------------------------------------------------------

    def fingerprint(self) -> str:
        """
        Compute a hash that uniquely identifies the graph structure.

        The hash includes node types, ids, properties, pin layout and links.
        """
        hasher = hashlib.sha256()
        hasher.update(self.name.encode())
        for node_id in sorted(self._nodes):
            hasher.update(json.dumps(self._nodes[node_id].describe(), sort_keys=True,
                                     default=str).encode())
        for link_id in sorted(self._links):
            link = self._links[link_id]
            hasher.update(f"link{link.id}:{link.output_id}->{link.input_id}".encode())
        return hasher.hexdigest()

    def clear(self) -> None:
        """Drop every node and link and restart the id counter."""
        for node in list(self._nodes.values()):
            self.remove_node(node)
        self._links.clear()
        self._pins.clear()
        self.ids.reset()
