from ..graph.node import FunctionNode, Node
from ..graph.pin import input_pin, output_pin
from ..ir.types import FLOAT2, FLOAT4, TEXTURE2D


class TextureNode(Node):
    """
    Texture resource exposed as a Texture2D pin.

    Consumers receive the declared texture (and its sampler) by name; the
    node owns one texture/sampler slot pair per pass.
    """
    type_name = "Texture"
    PROPERTIES = {'path': None}

    def initialize(self, graph):
        self.add_or_get_pin(output_pin("Texture", TEXTURE2D))

    def define_method(self, context, table):
        binding = context.texture_binding(self, source=self.properties['path'])
        context.set_output(self.get_output("Texture"), binding.texture_name)


class TextureFileNode(FunctionNode):
    """
    Samples its own texture at a UV coordinate.

    The sampling method is named after the texture slot, so each texture
    node in a pass registers exactly one method.
    """
    type_name = "TextureFile"
    PROPERTIES = {'path': None}
    return_type = FLOAT4

    def initialize(self, graph):
        self.add_or_get_pin(input_pin("UV", FLOAT2, "input.tex"))
        self.add_or_get_pin(output_pin("Color", FLOAT4))

    def resolve_method_name(self, context):
        binding = context.texture_binding(self, source=self.properties['path'])
        return f"SampleTexture{binding.texture_slot}"

    def method_body(self, context, table):
        binding = context.texture_binding(self)
        return f"return {binding.texture_name}.Sample({binding.sampler_name}, uv);"
