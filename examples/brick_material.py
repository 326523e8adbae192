import logging

from material_nodes import MaterialCompiler, NodeGraph, create_node, setup_logger

# =============================================================================
# UTILS
# =============================================================================

def link(graph, from_node, from_pin, to_node, to_pin):
    return graph.link(from_node.get_output(from_pin), to_node.get_input(to_pin))

# =============================================================================
# MATERIALS
# =============================================================================

def create_brick_material() -> NodeGraph:
    """
    Parallax-mapped brick wall.

    Height -> Parallax (occlusion) -> UV -> Albedo ------------> Base Color
                                     -> UV -> Normal Tex -> Normal Map -> Normal
    Roughness: albedo luminance scaled into 0.4 - 0.9
    """
    graph = NodeGraph("Brick")

    height = graph.add_node(create_node("Texture", name="Height", path="textures/brick_height.dds"))
    parallax = graph.add_node(create_node("ParallaxMap", name="Parallax", mode='OCCLUSION_MAPPING'))
    link(graph, height, "Texture", parallax, "Height Map")

    albedo = graph.add_node(create_node("TextureFile", name="Albedo", path="textures/brick_albedo.dds"))
    normal_tex = graph.add_node(create_node("TextureFile", name="NormalTex", path="textures/brick_normal.dds"))
    link(graph, parallax, "UV Offset", albedo, "UV")
    link(graph, parallax, "UV Offset", normal_tex, "UV")

    normal = graph.add_node(create_node("NormalMap", name="Bumps"))
    link(graph, normal_tex, "Color", normal, "Color")

    # Roughness from albedo red channel
    red = graph.add_node(create_node("ComponentMask", name="Red", mask='r', type='FLOAT4'))
    link(graph, albedo, "Color", red, "Value")
    rough_max = graph.add_node(create_node("Constant", name="RoughMax", value=0.9))
    rough_min = graph.add_node(create_node("Constant", name="RoughMin", value=0.4))
    rough = graph.add_node(create_node("Math", name="Rough", operation='LERP'))
    link(graph, rough_max, "Value", rough, "A")
    link(graph, rough_min, "Value", rough, "B")
    link(graph, red, "Result", rough, "C")

    out = graph.add_node(create_node("MaterialOutput", name="Output"))
    link(graph, albedo, "Color", out, "Base Color")
    link(graph, normal, "World Normal", out, "Normal")
    link(graph, rough, "Result", out, "Roughness")

    return graph


def create_tinted_material() -> NodeGraph:
    """Flat color multiplied by a user function; no textures."""
    graph = NodeGraph("Tinted")

    base = graph.add_node(create_node("Constant", name="Base", value=(0.8, 0.3, 0.2, 1.0), type='FLOAT4'))
    tint = graph.add_node(create_node(
        "CustomFunction", name="Warm",
        function_name="WarmTint",
        body="return float4(color.rgb * float3(1.0, 0.9, 0.8) * amount, color.a);",
        result_type='FLOAT4',
        parameters=(("Color", 'FLOAT4'), ("Amount", 'FLOAT', "1.0")),
    ))
    link(graph, base, "Value", tint, "Color")

    out = graph.add_node(create_node("MaterialOutput", name="Output"))
    link(graph, tint, "Result", out, "Base Color")
    return graph


if __name__ == "__main__":
    setup_logger(logging.DEBUG)
    compiler = MaterialCompiler()

    for graph in (create_brick_material(), create_tinted_material()):
        result = compiler.compile(graph)
        print(f"// ---- {graph.name} ----")
        print(result.source)
        for binding in result.bindings:
            print(f"// {binding.kind.name.lower()} slot {binding.slot}: {binding.name} <- {binding.source}")

    # Unchanged graphs come from the cache
    compiler.compile(create_tinted_material())
    print(compiler.stats())
