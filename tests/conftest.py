"""
Pytest configuration and shared fixtures for Material Nodes tests.

This file provides:
1. Shared fixtures for graphs in common shapes
2. Helper functions for common assertions on generated source

Usage:
    pytest tests/ -v
"""

import pytest

from material_nodes.graph.nodetree import NodeGraph
from material_nodes.nodes import (
    MaterialOutputNode, MathNode, NormalMapNode, ParallaxMapNode, TextureFileNode, TextureNode,
)


# =============================================================================
# PYTEST FIXTURES
# =============================================================================

@pytest.fixture
def graph():
    """
    Creates an empty NodeGraph for testing.

    Example:
        def test_something(graph):
            node = graph.add_node(MathNode())
    """
    return NodeGraph(name="TestGraph")


@pytest.fixture
def normal_map_graph():
    """
    Texture sample feeding a normal map.

    Structure:
        NodeA (TextureFile, bricks.dds) -> Color -> NodeB (NormalMap)

    Returns:
        (graph, node_a, node_b)
    """
    graph = NodeGraph(name="NormalMapGraph")
    node_a = graph.add_node(TextureFileNode(name="NodeA", path="bricks.dds"))
    node_b = graph.add_node(NormalMapNode(name="NodeB"))
    graph.link(node_a.get_output("Color"), node_b.get_input("Color"))
    return graph, node_a, node_b


@pytest.fixture
def fan_out_graph():
    """
    One texture sample consumed by two normal maps.

    Structure:
        NodeA -> NodeB
              -> NodeC

    Returns:
        (graph, node_a, node_b, node_c)
    """
    graph = NodeGraph(name="FanOutGraph")
    node_a = graph.add_node(TextureFileNode(name="NodeA", path="bricks.dds"))
    node_b = graph.add_node(NormalMapNode(name="NodeB"))
    node_c = graph.add_node(NormalMapNode(name="NodeC"))
    graph.link(node_a.get_output("Color"), node_b.get_input("Color"))
    graph.link(node_a.get_output("Color"), node_c.get_input("Color"))
    return graph, node_a, node_b, node_c


@pytest.fixture
def two_texture_graph():
    """
    Two texture samples added together.

    Structure:
        Albedo (slot 0) -> A
                            Math(ADD, FLOAT4)
        Detail (slot 1) -> B
    """
    graph = NodeGraph(name="TwoTextureGraph")
    albedo = graph.add_node(TextureFileNode(name="Albedo", path="albedo.dds"))
    detail = graph.add_node(TextureFileNode(name="Detail", path="detail.dds"))
    add = graph.add_node(MathNode(name="Blend", operation='ADD', type='FLOAT4'))
    graph.link(albedo.get_output("Color"), add.get_input("A"))
    graph.link(detail.get_output("Color"), add.get_input("B"))
    return graph, albedo, detail, add


@pytest.fixture
def material_graph():
    """
    Full material: parallax-offset UVs drive albedo and normal samples.

    Structure:
        Height (Texture) -> ParallaxMap -> UV -> Albedo (TextureFile) -> Base Color
                                        -> UV -> NormalTex (TextureFile) -> NormalMap -> Normal
        MaterialOutput
    """
    graph = NodeGraph(name="Brick")
    height = graph.add_node(TextureNode(name="Height", path="brick_height.dds"))
    parallax = graph.add_node(ParallaxMapNode(name="Parallax", mode='OCCLUSION_MAPPING'))
    albedo = graph.add_node(TextureFileNode(name="Albedo", path="brick_albedo.dds"))
    normal_tex = graph.add_node(TextureFileNode(name="NormalTex", path="brick_normal.dds"))
    normal = graph.add_node(NormalMapNode(name="NormalMap"))
    output = graph.add_node(MaterialOutputNode(name="Output"))

    graph.link(height.get_output("Texture"), parallax.get_input("Height Map"))
    graph.link(parallax.get_output("UV Offset"), albedo.get_input("UV"))
    graph.link(parallax.get_output("UV Offset"), normal_tex.get_input("UV"))
    graph.link(normal_tex.get_output("Color"), normal.get_input("Color"))
    graph.link(albedo.get_output("Color"), output.get_input("Base Color"))
    graph.link(normal.get_output("World Normal"), output.get_input("Normal"))
    return graph


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def assert_defined_once(source, signature, msg=""):
    """Assert that a function signature appears exactly once in the source."""
    count = source.count(signature)
    assert count == 1, f"Expected '{signature}' once, found {count}. {msg}"


def assert_in_order(source, *fragments):
    """Assert that each fragment occurs in the source after the previous one."""
    position = -1
    for fragment in fragments:
        index = source.find(fragment, position + 1)
        assert index > position, f"'{fragment}' missing or out of order"
        position = index
