"""
Custom exceptions for the Material Nodes compiler.

This module provides a hierarchy of exceptions for better error handling
and debugging. Every compilation error carries the identity of the node
that caused it so the fault can be located in the source graph.

Exception Hierarchy:
    MaterialNodesError (base)
    ├── GraphError
    │   ├── TypeMismatchError
    │   ├── InvalidLinkError
    │   ├── NodeNotFoundError
    │   └── PinNotFoundError
    └── CompilationError
        ├── MissingInputError
        ├── AmbiguousInputError
        ├── CyclicGraphError
        ├── DuplicateMethodConflict
        ├── UnknownNodeCapability
        ├── UnresolvedOutputError
        └── CompilationCancelled
"""


class MaterialNodesError(Exception):
    """Base exception for all Material Nodes errors."""
    pass


# =============================================================================
# Graph Errors
# =============================================================================

class GraphError(MaterialNodesError):
    """Base exception for graph construction/editing errors."""
    pass


class TypeMismatchError(GraphError):
    """
    Raised when a link would connect pins with incompatible types.

    Attributes:
        output_type: Type of the producing pin
        input_type: Type of the consuming pin
    """

    def __init__(self, message: str, output_type=None, input_type=None):
        super().__init__(message)
        self.output_type = output_type
        self.input_type = input_type


class InvalidLinkError(GraphError):
    """Raised when a link has the wrong direction or targets its own node."""
    pass


class NodeNotFoundError(GraphError):
    """Raised when a node id is not part of the graph."""

    def __init__(self, message: str, node_id: int = None):
        super().__init__(message)
        self.node_id = node_id


class PinNotFoundError(GraphError):
    """Raised when a pin id or name cannot be found."""

    def __init__(self, message: str, pin_id: int = None, pin_name: str = None):
        super().__init__(message)
        self.pin_id = pin_id
        self.pin_name = pin_name


# =============================================================================
# Compilation Errors
# =============================================================================

class CompilationError(MaterialNodesError):
    """
    Base exception for code generation errors.

    Attributes:
        node_id: Id of the node being compiled when the error occurred
        node_name: Name of that node
    """

    def __init__(self, message: str, node_id: int = None, node_name: str = None):
        super().__init__(message)
        self.node_id = node_id
        self.node_name = node_name

    def location(self) -> str:
        if self.node_id is None:
            return "<graph>"
        return f"{self.node_name} (#{self.node_id})"


class MissingInputError(CompilationError):
    """Raised when a required input is unconnected and has no default."""

    def __init__(self, message: str, node_id: int = None, node_name: str = None,
                 pin_name: str = None):
        super().__init__(message, node_id, node_name)
        self.pin_name = pin_name


class AmbiguousInputError(CompilationError):
    """Raised when a single-valued input pin carries more than one link."""

    def __init__(self, message: str, node_id: int = None, node_name: str = None,
                 pin_name: str = None, link_count: int = 0):
        super().__init__(message, node_id, node_name)
        self.pin_name = pin_name
        self.link_count = link_count


class CyclicGraphError(CompilationError):
    """
    Raised when the dependency walk re-enters a node that is still in progress.

    Attributes:
        chain: Node names from the first in-progress node back to itself
    """

    def __init__(self, message: str, node_id: int = None, node_name: str = None,
                 chain: list = None):
        super().__init__(message, node_id, node_name)
        self.chain = chain or []


class DuplicateMethodConflict(CompilationError):
    """
    Raised when a method name is registered twice with different code.

    Attributes:
        method_name: The conflicting method name
        existing: Source text already registered under that name
        incoming: Source text of the rejected registration
    """

    def __init__(self, message: str, method_name: str = None, existing: str = None,
                 incoming: str = None, node_id: int = None, node_name: str = None):
        super().__init__(message, node_id, node_name)
        self.method_name = method_name
        self.existing = existing
        self.incoming = incoming

    def format_with_source(self) -> str:
        """Format error with both conflicting definitions."""
        lines = [f"DuplicateMethodConflict: {self}"]
        if self.existing:
            lines.append("--- REGISTERED ---")
            lines.append(self.existing)
        if self.incoming:
            lines.append("--- INCOMING ---")
            lines.append(self.incoming)
        lines.append("------------------")
        return '\n'.join(lines)


class UnknownNodeCapability(CompilationError):
    """Raised when a function node supplies no method name."""
    pass


class UnresolvedOutputError(CompilationError):
    """Raised when a compiled node produced no value for a linked output pin."""

    def __init__(self, message: str, node_id: int = None, node_name: str = None,
                 pin_name: str = None):
        super().__init__(message, node_id, node_name)
        self.pin_name = pin_name


class CompilationCancelled(CompilationError):
    """Raised when the caller cancels a pass before it completes."""
    pass
