from ..codegen.emitters.const import format_constant
from ..graph.node import Node
from ..graph.pin import output_pin
from ..ir.types import parse_type


class ConstantNode(Node):
    """
    Typed literal held in a local.

    Properties:
        value: Scalar, sequence or numpy array
        type: Output type name ("FLOAT", "FLOAT3", ...)
    """
    type_name = "Constant"
    PROPERTIES = {'value': 0.0, 'type': 'FLOAT'}
    pin_properties = ('type',)

    def initialize(self, graph):
        self.add_or_get_pin(output_pin("Value", parse_type(self.properties['type'])))

    def define_method(self, context, table):
        out = self.get_output("Value")
        literal = format_constant(self.properties['value'], out.type)
        context.set_output(out, context.add_variable(self, out.type, literal))
