from ..graph.node import FunctionNode
from ..graph.pin import input_pin, output_pin
from ..ir.types import parse_type


class CustomFunctionNode(FunctionNode):
    """
    User-authored function.

    Properties:
        function_name: Name of the registered method
        body: Method body (without braces)
        result_type: Return type name; changing it rebuilds the output pin
        parameters: Sequence of (name, type) or (name, type, default) entries,
            one input pin each in declaration order
        include_paths: Include paths the body depends on

    Two custom nodes sharing a function name must share the body as well;
    otherwise compilation fails with DuplicateMethodConflict.
    """
    type_name = "CustomFunction"
    PROPERTIES = {
        'function_name': None,
        'body': "return 0;",
        'result_type': 'FLOAT4',
        'parameters': (),
        'include_paths': (),
    }
    pin_properties = ('result_type', 'parameters')

    def initialize(self, graph):
        for entry in self.properties['parameters']:
            name, type_name = entry[0], entry[1]
            default = entry[2] if len(entry) > 2 else None
            self.add_or_get_pin(input_pin(name, parse_type(type_name), default))
        self.add_or_get_pin(output_pin("Result", self.get_return_type()))

    def resolve_method_name(self, context):
        return self.properties['function_name']

    def get_return_type(self):
        return parse_type(self.properties['result_type'])

    def get_includes(self):
        return tuple(self.properties['include_paths'])

    def method_body(self, context, table):
        return self.properties['body']
