from ..codegen.emitters.const import format_constant
from ..graph.node import Node
from ..graph.pin import input_pin, output_pin
from ..ir.types import SType, parse_type

_SWIZZLE_SETS = ("xyzw", "rgba")


def validate_mask(mask: str, component_count: int) -> str:
    """Check that `mask` is a swizzle within the first `component_count` components."""
    if not 1 <= len(mask) <= 4:
        raise ValueError(f"Mask '{mask}' must select 1 to 4 components")
    for letters in _SWIZZLE_SETS:
        if all(c in letters for c in mask):
            if any(letters.index(c) >= component_count for c in mask):
                raise ValueError(f"Mask '{mask}' reads past {component_count} components")
            return mask
    raise ValueError(f"Mask '{mask}' mixes or uses unknown component names")


class ComponentMaskNode(Node):
    """Swizzles a vector; the output width follows the mask length."""
    type_name = "ComponentMask"
    PROPERTIES = {'mask': 'xyz', 'type': 'FLOAT4'}
    pin_properties = ('mask', 'type')

    def initialize(self, graph):
        in_type = parse_type(self.properties['type'])
        mask = validate_mask(self.properties['mask'], in_type.pin_type.component_count())
        out_type = SType(in_type.pin_type.with_components(len(mask)))

        self.add_or_get_pin(input_pin("Value", in_type, format_constant(0, in_type)))
        self.add_or_get_pin(output_pin("Result", out_type))

    def define_method(self, context, table):
        value = context.resolve(self.get_input("Value"))
        out = self.get_output("Result")
        var = context.add_variable(self, out.type, f"{value}.{self.properties['mask']}")
        context.set_output(out, var)
