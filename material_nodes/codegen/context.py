"""
GenerationContext - dependency-resolution engine for one compilation pass.

Compiling a node first compiles everything upstream of it, dependencies
before dependents, then runs its define_method; resolving an input returns
the expression the upstream node published for the linked output pin.
Every node is compiled at most once per pass, so a node feeding several
consumers contributes a single method and a single local.

Texture-owning nodes receive a (texture, sampler) slot pair when they are
compiled; slots are handed out in compile order and never change for the
rest of the pass.
"""

import logging
from typing import Dict, List, Optional, Set

from ..config import DEFAULT_INPUT_NAME, GeneratorSettings
from ..errors import (
    AmbiguousInputError, CompilationCancelled, CyclicGraphError, MissingInputError,
    UnresolvedOutputError,
)
from ..graph.node import Node, sanitize_identifier
from ..graph.nodetree import NodeGraph
from ..graph.pin import Pin
from ..ir.resources import ResourceBinding, ResourceKind, TextureBinding
from ..ir.types import SType
from .variable_table import VariableTable

logger = logging.getLogger(__name__)


class GenerationContext:
    def __init__(self, graph: NodeGraph, table: Optional[VariableTable] = None,
                 settings: Optional[GeneratorSettings] = None, cancel_event=None):
        self.graph = graph
        self.settings = settings or (table.settings if table is not None else GeneratorSettings())
        self.table = table if table is not None else VariableTable(self.settings)
        self.cancel_event = cancel_event

        # node id -> slot
        self.texture_mapping: Dict[int, int] = {}
        self.sampler_mapping: Dict[int, int] = {}
        self._texture_bindings: Dict[int, TextureBinding] = {}
        self._texture_sources: Dict[int, Optional[str]] = {}

        self._compiled: Set[int] = set()
        self._in_progress: List[Node] = []
        self._outputs: Dict[int, str] = {}

    # -------------------------------------------------------------------------
    # Dependency walk
    # -------------------------------------------------------------------------

    def resolve(self, pin: Pin) -> str:
        """
        Expression text for an input pin.

        Unlinked inputs fall back to their default expression. A linked input
        compiles its upstream node (once per pass) and returns the expression
        published for the linked output.
        """
        if pin.type.is_texture:
            return self.resolve_texture(pin).texture_name

        output = self._linked_output(pin)
        if output is None:
            return self._default_for(pin)

        self.compile_node(self.graph.node_of(output))
        return self.get_output(output)

    def resolve_texture(self, pin: Pin) -> TextureBinding:
        """Slot pair and declared names of the texture feeding `pin`."""
        output = self._linked_output(pin)
        if output is None:
            node = self.graph.node_of(pin)
            raise MissingInputError(
                f"Texture input '{pin.name}' on '{node.name}' is not connected",
                node_id=node.id, node_name=node.name, pin_name=pin.name)

        upstream = self.graph.node_of(output)
        self.compile_node(upstream)
        return self.texture_binding(upstream)

    def compile_node(self, node: Node) -> None:
        """
        Compile `node` and every uncompiled node upstream of it.

        The upstream set is ordered on an explicit work stack before any
        node runs, so long chains never deepen the interpreter stack.
        """
        if node.id in self._compiled:
            return
        for pending in self._schedule(node):
            self._define(pending)

    def is_compiled(self, node: Node) -> bool:
        return node.id in self._compiled

    def _upstream(self, node: Node) -> List[Node]:
        nodes = []
        for pin in node.inputs:
            for link in pin.links:
                nodes.append(self.graph.node_of(self.graph.get_pin(link.output_id)))
        return nodes

    def _schedule(self, root: Node) -> List[Node]:
        """Uncompiled dependencies of `root` in post-order, `root` last."""
        order: List[Node] = []
        scheduled: Set[int] = set()
        path = [root]
        on_path = {root.id}
        stack = [iter(self._upstream(root))]
        while stack:
            upstream = next(stack[-1], None)
            if upstream is None:
                stack.pop()
                done = path.pop()
                on_path.discard(done.id)
                scheduled.add(done.id)
                order.append(done)
                continue
            if upstream.id in self._compiled or upstream.id in scheduled:
                continue
            if upstream.id in on_path:
                self._raise_cycle(path, upstream)
            path.append(upstream)
            on_path.add(upstream.id)
            stack.append(iter(self._upstream(upstream)))
        return order

    def _define(self, node: Node) -> None:
        if node in self._in_progress:
            self._raise_cycle(self._in_progress, node)

        if self.cancel_event is not None and self.cancel_event.is_set():
            raise CompilationCancelled(
                f"Compilation cancelled before '{node.name}'", node_id=node.id, node_name=node.name)

        logger.debug(f"Compiling {node.name} (#{node.id})")
        self._in_progress.append(node)
        try:
            node.define_method(self, self.table)
        finally:
            self._in_progress.pop()
        self._compiled.add(node.id)

    def _raise_cycle(self, path: List[Node], node: Node):
        start = path.index(node)
        chain = [n.name for n in path[start:]] + [node.name]
        raise CyclicGraphError(
            f"Cycle detected: {' -> '.join(chain)}",
            node_id=node.id, node_name=node.name, chain=chain)

    def _linked_output(self, pin: Pin) -> Optional[Pin]:
        links = pin.links
        if not links:
            return None
        if len(links) > 1:
            node = self.graph.node_of(pin)
            raise AmbiguousInputError(
                f"Input '{pin.name}' on '{node.name}' has {len(links)} links",
                node_id=node.id, node_name=node.name, pin_name=pin.name, link_count=len(links))
        return self.graph.get_pin(links[0].output_id)

    def _default_for(self, pin: Pin) -> str:
        if pin.default_expression is None:
            node = self.graph.node_of(pin)
            raise MissingInputError(
                f"Input '{pin.name}' on '{node.name}' is not connected and has no default",
                node_id=node.id, node_name=node.name, pin_name=pin.name)
        return self.rebase_input(pin.default_expression)

    def rebase_input(self, expression: str) -> str:
        """Point "input.member" expressions at the configured input variable."""
        prefix = DEFAULT_INPUT_NAME + "."
        if self.settings.input_name != DEFAULT_INPUT_NAME and expression.startswith(prefix):
            return f"{self.settings.input_name}.{expression[len(prefix):]}"
        return expression

    # -------------------------------------------------------------------------
    # Outputs and locals
    # -------------------------------------------------------------------------

    def set_output(self, pin: Pin, expression: str) -> None:
        self._outputs[pin.id] = expression

    def get_output(self, pin: Pin) -> str:
        expression = self._outputs.get(pin.id)
        if expression is None:
            node = self.graph.node_of(pin)
            raise UnresolvedOutputError(
                f"'{node.name}' produced no value for output '{pin.name}'",
                node_id=node.id, node_name=node.name, pin_name=pin.name)
        return expression

    def has_output(self, pin: Pin) -> bool:
        return pin.id in self._outputs

    def add_variable(self, node: Node, type: SType, expression: str,
                     name: Optional[str] = None) -> str:
        """Declare a local holding `expression`; returns its unique name."""
        base = name or sanitize_identifier(node.name)
        return self.table.add_variable(node.id, base, type, expression).name

    # -------------------------------------------------------------------------
    # Texture slots
    # -------------------------------------------------------------------------

    def texture_binding(self, node: Node, source: Optional[str] = None) -> TextureBinding:
        """
        Slot pair owned by `node`, assigned on first request.

        `source` (asset path) is recorded on first assignment and reported
        back through bindings().
        """
        binding = self._texture_bindings.get(node.id)
        if binding is not None:
            return binding

        texture_slot = len(self.texture_mapping)
        sampler_slot = len(self.sampler_mapping)
        self.texture_mapping[node.id] = texture_slot
        self.sampler_mapping[node.id] = sampler_slot

        texture = self.table.get_resource_declaration(ResourceKind.TEXTURE, texture_slot)
        sampler = self.table.get_resource_declaration(ResourceKind.SAMPLER, sampler_slot)
        binding = TextureBinding(node.id, texture_slot, sampler_slot, texture.name, sampler.name)
        self._texture_bindings[node.id] = binding
        self._texture_sources[node.id] = source
        logger.debug(f"{node.name} bound to t{texture_slot}/s{sampler_slot}")
        return binding

    def bindings(self) -> List[ResourceBinding]:
        """Slot table for the caller: textures by slot, then samplers by slot."""
        textures = []
        samplers = []
        for node_id, binding in self._texture_bindings.items():
            source = self._texture_sources.get(node_id)
            textures.append(ResourceBinding(
                ResourceKind.TEXTURE, binding.texture_slot, binding.texture_name, node_id, source))
            samplers.append(ResourceBinding(
                ResourceKind.SAMPLER, binding.sampler_slot, binding.sampler_name, node_id))
        textures.sort(key=lambda b: b.slot)
        samplers.sort(key=lambda b: b.slot)
        return textures + samplers
