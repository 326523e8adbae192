from ..graph.node import Node
from ..graph.pin import output_pin
from ..ir.types import PinType

# Members of the pixel input struct, in declaration order
PIXEL_INPUT_MEMBERS = (
    ("Position", "position", PinType.FLOAT4),
    ("World Position", "pos", PinType.FLOAT4),
    ("UV", "tex", PinType.FLOAT2),
    ("Normal", "normal", PinType.FLOAT3),
    ("Tangent", "tangent", PinType.FLOAT3),
    ("Bitangent", "bitangent", PinType.FLOAT3),
)


class InputNode(Node):
    """Exposes the pixel input members; contributes no code of its own."""
    type_name = "Input"

    def initialize(self, graph):
        for label, _, pin_type in PIXEL_INPUT_MEMBERS:
            self.add_or_get_pin(output_pin(label, pin_type))

    def define_method(self, context, table):
        input_name = context.settings.input_name
        for label, member, _ in PIXEL_INPUT_MEMBERS:
            context.set_output(self.get_output(label), f"{input_name}.{member}")
