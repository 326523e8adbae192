from ..codegen.emitters.const import format_constant
from ..codegen.emitters.math import get_math_operation
from ..graph.node import Node
from ..graph.pin import input_pin, output_pin
from ..ir.types import FLOAT, FLOAT3, parse_type

_INPUT_NAMES = ("A", "B", "C")

# Operand defaults that keep the operation neutral when unlinked
_ONE_DEFAULTS = {('DIV', 'B'), ('POW', 'B'), ('MUL', 'B'), ('CLAMP', 'C'), ('SMOOTHSTEP', 'B')}


class MathNode(Node):
    """
    Operator or intrinsic over one to three operands.

    The operation selects the operand count; `type` sets the operand and
    result type. Changing either rebuilds the pins.
    """
    type_name = "Math"
    PROPERTIES = {'operation': 'ADD', 'type': 'FLOAT'}
    pin_properties = ('operation', 'type')

    def _signature(self):
        operation = self.properties['operation']
        count, emit, scalar_result = get_math_operation(operation)
        operand = parse_type(self.properties['type'])
        if operation == 'CROSS':
            operand = FLOAT3
        result = FLOAT if scalar_result else operand
        return count, emit, operand, result

    def initialize(self, graph):
        count, _, operand, result = self._signature()
        operation = self.properties['operation']
        for name in _INPUT_NAMES[:count]:
            value = 1 if (operation, name) in _ONE_DEFAULTS else 0
            self.add_or_get_pin(input_pin(name, operand, format_constant(value, operand)))
        self.add_or_get_pin(output_pin("Result", result))

    def define_method(self, context, table):
        count, emit, _, result = self._signature()
        args = [context.resolve(self.get_input(name)) for name in _INPUT_NAMES[:count]]
        var = context.add_variable(self, result, emit(args))
        context.set_output(self.get_output("Result"), var)
