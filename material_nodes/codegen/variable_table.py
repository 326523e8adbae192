"""
VariableTable - additive sink for one compilation pass.

Collects include paths, function definitions, resource declarations and
the locals of the entry function, then serializes them once:

    includes -> textures by slot -> samplers by slot -> methods -> entry point
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from ..config import GeneratorSettings
from ..errors import DuplicateMethodConflict
from ..ir.resources import ResourceDesc, ResourceKind
from ..ir.types import SType

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Method:
    """A registered function: signature plus body text."""
    name: str
    params: Tuple[str, ...]
    return_type: SType
    body: str

    @property
    def signature(self) -> str:
        return f"{self.return_type.name} {self.name}({', '.join(self.params)})"

    def build(self, indent: str) -> str:
        lines = [self.signature, "{"]
        for line in self.body.strip('\n').split('\n'):
            lines.append(f"{indent}{line}" if line.strip() else "")
        lines.append("}")
        return "\n".join(lines)


@dataclass
class Variable:
    """Local statement in the entry function."""
    node_id: int
    name: str
    type: SType
    expression: str

    def build(self) -> str:
        return f"{self.type.declare(self.name)} = {self.expression};"


@dataclass
class EntryPoint:
    """
    Entry function wrapping the locals.

    `epilogue` lines are appended after the locals (struct assignments,
    return statement).
    """
    name: str
    params: Tuple[str, ...]
    return_type: str = "void"
    epilogue: List[str] = field(default_factory=list)


class VariableTable:
    def __init__(self, settings: Optional[GeneratorSettings] = None):
        self.settings = settings or GeneratorSettings()
        self._includes: Dict[str, None] = {}
        self._methods: Dict[str, Method] = {}
        self._resources: Dict[Tuple[ResourceKind, int], ResourceDesc] = {}
        self._variables: List[Variable] = []
        self._identifiers: set = set()
        self.entry_point: Optional[EntryPoint] = None

    # -------------------------------------------------------------------------
    # Includes
    # -------------------------------------------------------------------------

    def add_include(self, path: str) -> None:
        self._includes.setdefault(path, None)

    @property
    def includes(self) -> Tuple[str, ...]:
        return tuple(self._includes)

    # -------------------------------------------------------------------------
    # Methods
    # -------------------------------------------------------------------------

    def add_method(self, name: str, params: Sequence[str], return_type: SType, body: str,
                   owner=None) -> Method:
        """
        Register a function.

        Registering an identical signature and body again is a no-op; a
        different definition under the same name raises
        DuplicateMethodConflict.
        """
        method = Method(name, tuple(params), return_type, body)
        existing = self._methods.get(name)
        if existing is not None:
            if existing == method:
                return existing
            indent = self.settings.indent
            raise DuplicateMethodConflict(
                f"Method '{name}' is already defined with a different body",
                method_name=name, existing=existing.build(indent), incoming=method.build(indent),
                node_id=getattr(owner, 'id', None), node_name=getattr(owner, 'name', None))

        self._methods[name] = method
        self._identifiers.add(name)
        return method

    @property
    def methods(self) -> Tuple[Method, ...]:
        return tuple(self._methods.values())

    # -------------------------------------------------------------------------
    # Resources
    # -------------------------------------------------------------------------

    def get_resource_declaration(self, kind: ResourceKind, slot: int,
                                 hint: Optional[str] = None,
                                 type_name: Optional[str] = None) -> ResourceDesc:
        """Return the declared resource for `slot`, declaring it on first use."""
        key = (kind, slot)
        desc = self._resources.get(key)
        if desc is not None:
            return desc

        base = hint or f"{kind.name_prefix}{slot}"
        if type_name is None:
            type_name = "Texture2D" if kind == ResourceKind.TEXTURE else "SamplerState"
        desc = ResourceDesc(kind, slot, self.get_unique_name(base), type_name)
        self._identifiers.add(desc.name)
        self._resources[key] = desc
        return desc

    @property
    def resources(self) -> Tuple[ResourceDesc, ...]:
        """Declared resources, textures before samplers, each by slot."""
        return tuple(self._resources[k] for k in sorted(
            self._resources, key=lambda k: (k[0].value, k[1])))

    # -------------------------------------------------------------------------
    # Locals
    # -------------------------------------------------------------------------

    def add_variable(self, node_id: int, name: str, type: SType, expression: str) -> Variable:
        var = Variable(node_id, self.get_unique_name(name), type, expression)
        self._identifiers.add(var.name)
        self._variables.append(var)
        return var

    @property
    def variables(self) -> Tuple[Variable, ...]:
        return tuple(self._variables)

    # -------------------------------------------------------------------------
    # Identifiers
    # -------------------------------------------------------------------------

    def reserve_identifier(self, name: str) -> str:
        """Claim a unique identifier not backed by a local (struct variables, etc.)."""
        unique = self.get_unique_name(name)
        self._identifiers.add(unique)
        return unique

    def identifier_exists(self, name: str) -> bool:
        return name in self._identifiers or name in self.settings.reserved_words

    def get_unique_name(self, name: str) -> str:
        """`name`, or `name0`, `name1`, ... if already taken or reserved."""
        new_name = name
        suffix = 0
        while self.identifier_exists(new_name):
            new_name = f"{name}{suffix}"
            suffix += 1
        return new_name

    # -------------------------------------------------------------------------
    # Entry point
    # -------------------------------------------------------------------------

    def set_entry_point(self, entry: EntryPoint) -> None:
        if self.entry_point is not None and self.entry_point != entry:
            logger.debug(f"Replacing entry point {self.entry_point.name}")
        self.entry_point = entry

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def serialize(self) -> str:
        indent = self.settings.indent
        comments = self.settings.emit_section_comments
        sections = []

        if self._includes:
            sections.append("\n".join(f'#include "{path}"' for path in self._includes))

        resources = self.resources
        if resources:
            lines = ["// Resources"] if comments else []
            lines.extend(r.declaration() for r in resources)
            sections.append("\n".join(lines))

        for method in self._methods.values():
            sections.append(method.build(indent))

        if self.entry_point is not None:
            sections.append(self._build_entry(indent))

        text = "\n\n".join(sections)
        return text + "\n" if text else ""

    def _build_entry(self, indent: str) -> str:
        entry = self.entry_point
        lines = [f"{entry.return_type} {entry.name}({', '.join(entry.params)})", "{"]
        for var in self._variables:
            lines.append(f"{indent}{var.build()}")
        for line in entry.epilogue:
            lines.append(f"{indent}{line}")
        lines.append("}")
        return "\n".join(lines)

    def clear(self) -> None:
        self._includes.clear()
        self._methods.clear()
        self._resources.clear()
        self._variables.clear()
        self._identifiers.clear()
        self.entry_point = None
