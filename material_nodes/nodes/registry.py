# Node Registry
# Maps type_name -> node class

from typing import Dict, Optional, Type

from ..errors import GraphError
from ..graph.node import Node
from .constant import ConstantNode
from .converter import ComponentMaskNode
from .custom import CustomFunctionNode
from .input import InputNode
from .math import MathNode
from .normal import NormalMapNode
from .output import MaterialOutputNode
from .parallax import ParallaxMapNode
from .textures import TextureFileNode, TextureNode

node_classes = [
    InputNode,
    ConstantNode,
    ComponentMaskNode,
    MathNode,
    TextureNode,
    TextureFileNode,
    NormalMapNode,
    ParallaxMapNode,
    CustomFunctionNode,
    MaterialOutputNode,
]

NODE_REGISTRY: Dict[str, Type[Node]] = {cls.type_name: cls for cls in node_classes}


def register_node(cls: Type[Node]) -> Type[Node]:
    """Add a node class to the registry; usable as a decorator."""
    existing = NODE_REGISTRY.get(cls.type_name)
    if existing is not None and existing is not cls:
        raise GraphError(f"Node type '{cls.type_name}' is already registered")
    NODE_REGISTRY[cls.type_name] = cls
    return cls


def get_node_class(type_name: str) -> Type[Node]:
    cls = NODE_REGISTRY.get(type_name)
    if cls is None:
        raise GraphError(f"Unknown node type '{type_name}'")
    return cls


def create_node(type_name: str, name: Optional[str] = None, **properties) -> Node:
    """Instantiate a registered node by type name."""
    return get_node_class(type_name)(name=name, **properties)
