"""
Material Nodes - compiles material node graphs to shader source.

Example:
    from material_nodes import NodeGraph, compile_material, create_node

    graph = NodeGraph("Brick")
    tex = graph.add_node(create_node("TextureFile", path="bricks.dds"))
    out = graph.add_node(create_node("MaterialOutput"))
    graph.link(tex.get_output("Color"), out.get_input("Base Color"))
    result = compile_material(graph)
"""

__version__ = "0.1.0"

from .config import GeneratorSettings
from .errors import *  # noqa: F401,F403
from .graph import FunctionNode, Link, Node, NodeGraph, Pin, PinKind
from .ir.resources import ResourceBinding, ResourceKind, TextureBinding
from .ir.types import PinType, SType
from .codegen import (
    CompileResult, GenerationContext, MaterialCompiler, VariableTable,
    compile_material, get_compiler,
)
from .nodes import (
    ComponentMaskNode, ConstantNode, CustomFunctionNode, InputNode, MaterialOutputNode,
    MathNode, NormalMapNode, ParallaxMapNode, TextureFileNode, TextureNode,
    NODE_REGISTRY, create_node, get_node_class,
)
from .logger import get_logger, setup_logger
