from ..codegen.variable_table import EntryPoint
from ..graph.node import Node, sanitize_identifier
from ..graph.pin import input_pin
from ..ir.types import FLOAT, FLOAT3, FLOAT4

# (pin name, type, default); the struct member is the sanitized pin name
GEOMETRY_MEMBERS = (
    ("Base Color", FLOAT4, "float4(1.0, 1.0, 1.0, 1.0)"),
    ("Normal", FLOAT3, "input.normal"),
    ("Roughness", FLOAT, "0.5"),
    ("Metallic", FLOAT, "0.0"),
    ("Emissive", FLOAT3, "float3(0.0, 0.0, 0.0)"),
    ("Ambient Occlusion", FLOAT, "1.0"),
)


class MaterialOutputNode(Node):
    """
    Material root.

    Fills the geometry output struct from its inputs and builds the entry
    point returning it. Unconnected channels use their defaults.
    """
    type_name = "MaterialOutput"
    is_output = True

    def initialize(self, graph):
        for name, type, default in GEOMETRY_MEMBERS:
            self.add_or_get_pin(input_pin(name, type, default))

    def define_method(self, context, table):
        settings = context.settings
        values = [(sanitize_identifier(name), context.resolve(self.get_input(name)))
                  for name, _, _ in GEOMETRY_MEMBERS]

        struct = settings.output_struct
        var = table.reserve_identifier(sanitize_identifier(struct))
        epilogue = [f"{struct} {var};"]
        epilogue.extend(f"{var}.{member} = {value};" for member, value in values)
        epilogue.append(f"return {var};")

        table.set_entry_point(EntryPoint(
            settings.entry_name,
            (f"{settings.input_struct} {settings.input_name}",),
            struct,
            epilogue,
        ))
