# Graph Package
# Nodes, pins and links of a material graph

from .node import Node, FunctionNode
from .nodetree import NodeGraph, IdGenerator
from .pin import Pin, PinKind, Link, input_pin, output_pin

__all__ = [
    'Node', 'FunctionNode', 'NodeGraph', 'IdGenerator',
    'Pin', 'PinKind', 'Link', 'input_pin', 'output_pin',
]
