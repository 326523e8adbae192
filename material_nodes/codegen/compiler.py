"""
Material compiler - turns a node graph into shader source with caching.

compile_material() runs one pass: a fresh GenerationContext/VariableTable
pair, every root compiled in order, then a single serialize(). The
MaterialCompiler wrapper caches results by graph fingerprint so an
unchanged graph is not regenerated.

Caching Strategy:
- Key is graph.fingerprint() + root ids + settings.cache_key()
- Results are immutable CompileResult values, safe to share
- Cache access is serialized with a lock; passes run outside it
"""

import logging
import threading
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from ..config import GeneratorSettings
from ..graph.node import Node
from ..graph.nodetree import NodeGraph
from ..ir.resources import ResourceBinding
from .context import GenerationContext
from .variable_table import EntryPoint, VariableTable

logger = logging.getLogger(__name__)

RootSpec = Union[Node, int]


@dataclass(frozen=True)
class CompileResult:
    """
    Output of one compilation pass.

    Attributes:
        source: Generated shader text
        includes: Include paths in first-seen order
        bindings: Slot table the caller binds GPU resources to
        entry_name: Name of the entry function (None when nothing was compiled)
    """
    source: str
    includes: Tuple[str, ...] = ()
    bindings: Tuple[ResourceBinding, ...] = ()
    entry_name: Optional[str] = None


def _resolve_roots(graph: NodeGraph, roots: Optional[Iterable[RootSpec]]) -> List[Node]:
    if roots is None:
        return [n for n in graph.nodes if n.is_output]
    resolved = []
    for root in roots:
        node = graph.get_node(root) if isinstance(root, int) else root
        if node not in resolved:
            resolved.append(node)
    return resolved


def _default_entry(context: GenerationContext, roots: List[Node]) -> EntryPoint:
    """Entry returning the single root's value, or void for several roots."""
    settings = context.settings
    params = (f"{settings.input_struct} {settings.input_name}",)
    if len(roots) == 1:
        for pin in roots[0].outputs:
            if context.has_output(pin):
                return EntryPoint(settings.entry_name, params, pin.type.name,
                                  [f"return {context.get_output(pin)};"])
    return EntryPoint(settings.entry_name, params)


def compile_material(graph: NodeGraph, roots: Optional[Iterable[RootSpec]] = None,
                     settings: Optional[GeneratorSettings] = None,
                     cancel_event=None) -> CompileResult:
    """
    Compile `graph` to shader source.

    Args:
        graph: Graph to compile
        roots: Nodes (or node ids) to compile; defaults to every output node
        settings: Naming/layout options
        cancel_event: Optional threading.Event checked before each node

    Returns:
        CompileResult with source text, includes and resource bindings

    Raises:
        CompilationError subclasses; no partial output is produced
    """
    settings = settings or GeneratorSettings()
    root_nodes = _resolve_roots(graph, roots)
    if not root_nodes:
        logger.warning(f"Graph '{graph.name}' has no root nodes to compile")
        return CompileResult(source="")

    table = VariableTable(settings)
    context = GenerationContext(graph, table, settings, cancel_event)

    for root in root_nodes:
        context.compile_node(root)

    if table.entry_point is None:
        table.set_entry_point(_default_entry(context, root_nodes))

    source = table.serialize()
    logger.debug(
        f"Compiled '{graph.name}': {len(table.methods)} methods, "
        f"{len(table.variables)} locals, {len(table.resources)} resources")

    return CompileResult(
        source=source,
        includes=table.includes,
        bindings=tuple(context.bindings()),
        entry_name=table.entry_point.name,
    )


class LRUCache:
    """
    Least Recently Used cache with size limit.

    When capacity is exceeded, the least recently accessed items are evicted.
    """

    def __init__(self, capacity: int = 16):
        self.capacity = capacity
        self._cache: OrderedDict = OrderedDict()
        self._hits = 0
        self._misses = 0

    def get(self, key: str) -> Optional[Any]:
        if key in self._cache:
            self._cache.move_to_end(key)
            self._hits += 1
            return self._cache[key]
        self._misses += 1
        return None

    def put(self, key: str, value: Any) -> None:
        if key in self._cache:
            self._cache.move_to_end(key)
            self._cache[key] = value
            return
        if len(self._cache) >= self.capacity:
            self._cache.popitem(last=False)
        self._cache[key] = value

    def invalidate_prefix(self, prefix: str) -> int:
        """Remove every entry whose key starts with `prefix`."""
        stale = [k for k in self._cache if k.startswith(prefix)]
        for key in stale:
            del self._cache[key]
        return len(stale)

    def clear(self) -> None:
        self._cache.clear()
        self._hits = 0
        self._misses = 0

    def __len__(self) -> int:
        return len(self._cache)

    def stats(self) -> Dict[str, Any]:
        total = self._hits + self._misses
        hit_rate = (self._hits / total * 100) if total > 0 else 0
        return {
            'size': len(self._cache),
            'capacity': self.capacity,
            'hits': self._hits,
            'misses': self._misses,
            'hit_rate': hit_rate,
        }


class MaterialCompiler:
    """
    Compiles material graphs with caching.

    Example:
        compiler = MaterialCompiler()
        result = compiler.compile(graph)
        # Second call with an unchanged graph is served from the cache
        result = compiler.compile(graph)
    """

    def __init__(self, cache_capacity: int = 16, settings: Optional[GeneratorSettings] = None):
        self._cache = LRUCache(capacity=cache_capacity)
        self._lock = threading.Lock()
        self.settings = settings or GeneratorSettings()

    def compile(self, graph: NodeGraph, roots: Optional[Iterable[RootSpec]] = None,
                settings: Optional[GeneratorSettings] = None,
                cancel_event=None) -> CompileResult:
        settings = settings or self.settings
        root_list = None if roots is None else list(roots)
        key = self._cache_key(graph, root_list, settings)

        with self._lock:
            cached = self._cache.get(key)
        if cached is not None:
            logger.debug(f"Material compile CACHE HIT (hash={key[:8]}...)")
            return cached

        logger.debug(f"Material compile CACHE MISS (hash={key[:8]}...)")
        result = compile_material(graph, root_list, settings, cancel_event)

        with self._lock:
            self._cache.put(key, result)
        return result

    def _cache_key(self, graph: NodeGraph, roots: Optional[List[RootSpec]],
                   settings: GeneratorSettings) -> str:
        if roots is None:
            root_ids = "auto"
        else:
            root_ids = ",".join(str(r if isinstance(r, int) else r.id) for r in roots)
        return f"{graph.fingerprint()}|{root_ids}|{settings.cache_key()}"

    def invalidate(self, graph: NodeGraph) -> bool:
        """
        Drop every cached result for the current state of `graph`.

        Returns:
            True if at least one entry was removed
        """
        with self._lock:
            return self._cache.invalidate_prefix(graph.fingerprint() + "|") > 0

    def clear_cache(self) -> None:
        with self._lock:
            self._cache.clear()
        logger.debug("MaterialCompiler cache cleared")

    def stats(self) -> Dict[str, Any]:
        with self._lock:
            return self._cache.stats()


# Singleton instance for convenience
_global_compiler: Optional[MaterialCompiler] = None


def get_compiler() -> MaterialCompiler:
    """Get the global MaterialCompiler instance."""
    global _global_compiler
    if _global_compiler is None:
        _global_compiler = MaterialCompiler()
    return _global_compiler
