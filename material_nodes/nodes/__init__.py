from .constant import ConstantNode
from .converter import ComponentMaskNode
from .custom import CustomFunctionNode
from .input import InputNode
from .math import MathNode
from .normal import NormalMapNode
from .output import MaterialOutputNode
from .parallax import ParallaxMapNode
from .textures import TextureFileNode, TextureNode
from .registry import NODE_REGISTRY, create_node, get_node_class, node_classes, register_node
