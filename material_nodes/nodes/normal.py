from ..graph.node import FunctionNode
from ..graph.pin import input_pin, output_pin
from ..ir.types import FLOAT3

NORMAL_MAP_BODY = """\
float3 n = normalize(color * 2.0 - 1.0);
float3x3 tbn = float3x3(normalize(tangent), normalize(bitangent), normalize(normal));
return normalize(mul(n, tbn));"""


class NormalMapNode(FunctionNode):
    """
    Tangent-space normal map sample -> world-space normal.

    Normal, Tangent and Bitangent default to the interpolated pixel input,
    so only Color has to be connected.
    """
    type_name = "NormalMap"
    method_name = "NormalMap"
    return_type = FLOAT3

    def initialize(self, graph):
        self.add_or_get_pin(input_pin("Color", FLOAT3))
        self.add_or_get_pin(input_pin("Normal", FLOAT3, "input.normal"))
        self.add_or_get_pin(input_pin("Tangent", FLOAT3, "input.tangent"))
        self.add_or_get_pin(input_pin("Bitangent", FLOAT3, "input.bitangent"))
        self.add_or_get_pin(output_pin("World Normal", FLOAT3))

    def method_body(self, context, table):
        return NORMAL_MAP_BODY
