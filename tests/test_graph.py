"""
Tests for pins, links and node lifecycle in NodeGraph.
"""

import unittest

import pytest

from material_nodes.codegen.compiler import compile_material
from material_nodes.errors import (
    GraphError, InvalidLinkError, NodeNotFoundError, PinNotFoundError, TypeMismatchError,
)
from material_nodes.graph.node import sanitize_identifier
from material_nodes.graph.nodetree import IdGenerator, NodeGraph
from material_nodes.graph.pin import PinKind
from material_nodes.ir.types import FLOAT3, FLOAT4
from material_nodes.nodes import (
    ConstantNode, CustomFunctionNode, MathNode, NormalMapNode, ParallaxMapNode, TextureFileNode,
    TextureNode, create_node,
)


class TestIdGenerator(unittest.TestCase):
    def test_monotonic(self):
        ids = IdGenerator()
        self.assertEqual([ids.next_id() for _ in range(3)], [1, 2, 3])

    def test_reserve_skips_external_ids(self):
        ids = IdGenerator()
        ids.reserve(40)
        self.assertEqual(ids.next_id(), 41)
        ids.reserve(10)
        self.assertEqual(ids.next_id(), 42)

    def test_reset(self):
        ids = IdGenerator()
        ids.next_id()
        ids.reset()
        self.assertEqual(ids.next_id(), 1)


class TestNodeGraph(unittest.TestCase):
    def setUp(self):
        self.graph = NodeGraph("Test")

    def test_add_node_assigns_ids_and_pins(self):
        node = self.graph.add_node(NormalMapNode())
        self.assertEqual(node.id, 1)
        self.assertIs(node.graph, self.graph)
        self.assertEqual([p.name for p in node.inputs], ["Color", "Normal", "Tangent", "Bitangent"])
        self.assertEqual([p.name for p in node.outputs], ["World Normal"])
        for pin in node.pins.values():
            self.assertEqual(pin.node_id, node.id)
            self.assertIs(self.graph.get_pin(pin.id), pin)
            self.assertIs(self.graph.node_of(pin), node)

    def test_explicit_node_id_is_reserved(self):
        node = self.graph.add_node(MathNode(id=50))
        self.assertEqual(node.id, 50)
        other = self.graph.add_node(MathNode())
        self.assertGreater(other.id, 50)

    def test_duplicate_node_id_rejected(self):
        self.graph.add_node(MathNode(id=5))
        with self.assertRaises(GraphError):
            self.graph.add_node(MathNode(id=5))

    def test_link_and_lookup(self):
        tex = self.graph.add_node(TextureFileNode())
        nrm = self.graph.add_node(NormalMapNode())
        link = self.graph.link(tex.get_output("Color"), nrm.get_input("Color"))

        self.assertEqual(link.output_id, tex.get_output("Color").id)
        self.assertEqual(link.input_id, nrm.get_input("Color").id)
        self.assertEqual(self.graph.links, [link])
        self.assertEqual(self.graph.links_of(nrm.get_input("Color")), [link])
        self.assertTrue(tex.get_output("Color").is_linked)

    def test_relinking_same_pair_is_noop(self):
        tex = self.graph.add_node(TextureFileNode())
        nrm = self.graph.add_node(NormalMapNode())
        first = self.graph.link(tex.get_output("Color"), nrm.get_input("Color"))
        second = self.graph.add_link(tex.get_output("Color"), nrm.get_input("Color"))
        self.assertIs(first, second)
        self.assertEqual(len(self.graph.links), 1)

    def test_input_holds_single_link(self):
        a = self.graph.add_node(TextureFileNode(name="A"))
        b = self.graph.add_node(TextureFileNode(name="B"))
        nrm = self.graph.add_node(NormalMapNode())
        self.graph.link(a.get_output("Color"), nrm.get_input("Color"))
        link = self.graph.link(b.get_output("Color"), nrm.get_input("Color"))

        self.assertEqual(nrm.get_input("Color").links, [link])
        self.assertFalse(a.get_output("Color").is_linked)
        self.assertEqual(len(self.graph.links), 1)

    def test_type_mismatch(self):
        tex = self.graph.add_node(TextureNode())
        math = self.graph.add_node(MathNode())
        with self.assertRaises(TypeMismatchError) as cm:
            self.graph.link(tex.get_output("Texture"), math.get_input("A"))
        self.assertEqual(cm.exception.input_type.name, "float")
        self.assertEqual(self.graph.links, [])

    def test_widening_rejected(self):
        normal = self.graph.add_node(NormalMapNode())
        add = self.graph.add_node(MathNode(type='FLOAT4'))
        with self.assertRaises(TypeMismatchError):
            self.graph.link(normal.get_output("World Normal"), add.get_input("A"))

    def test_invalid_direction(self):
        a = self.graph.add_node(MathNode())
        b = self.graph.add_node(MathNode())
        with self.assertRaises(InvalidLinkError):
            self.graph.link(a.get_input("A"), b.get_output("Result"))

    def test_self_link_rejected(self):
        a = self.graph.add_node(MathNode())
        with self.assertRaises(InvalidLinkError):
            self.graph.link(a.get_output("Result"), a.get_input("A"))

    def test_foreign_pin_rejected(self):
        other = NodeGraph("Other")
        a = other.add_node(MathNode())
        b = self.graph.add_node(MathNode())
        with self.assertRaises(PinNotFoundError):
            self.graph.link(a.get_output("Result"), b.get_input("A"))

    def test_remove_node_prunes_links(self):
        tex = self.graph.add_node(TextureFileNode())
        nrm = self.graph.add_node(NormalMapNode())
        color_pin = tex.get_output("Color")
        self.graph.link(color_pin, nrm.get_input("Color"))

        self.graph.remove_node(tex)

        self.assertEqual(self.graph.links, [])
        self.assertFalse(nrm.get_input("Color").is_linked)
        self.assertIsNone(tex.graph)
        with self.assertRaises(PinNotFoundError):
            self.graph.get_pin(color_pin.id)
        with self.assertRaises(NodeNotFoundError):
            self.graph.get_node(tex.id)
        with self.assertRaises(NodeNotFoundError):
            self.graph.remove_node(tex)

    def test_remove_link(self):
        tex = self.graph.add_node(TextureFileNode())
        nrm = self.graph.add_node(NormalMapNode())
        link = self.graph.link(tex.get_output("Color"), nrm.get_input("Color"))
        self.graph.remove_link(link)
        self.assertEqual(self.graph.links, [])
        self.assertFalse(tex.get_output("Color").is_linked)

    def test_find_nodes(self):
        self.graph.add_node(MathNode())
        tex = self.graph.add_node(TextureFileNode())
        self.assertEqual(self.graph.find_nodes(TextureFileNode), [tex])
        self.assertEqual(len(self.graph), 2)

    def test_clear(self):
        tex = self.graph.add_node(TextureFileNode())
        nrm = self.graph.add_node(NormalMapNode())
        self.graph.link(tex.get_output("Color"), nrm.get_input("Color"))
        self.graph.clear()
        self.assertEqual(len(self.graph), 0)
        self.assertEqual(self.graph.links, [])
        self.assertEqual(self.graph.add_node(MathNode()).id, 1)


class TestReinitialize(unittest.TestCase):
    def setUp(self):
        self.graph = NodeGraph("Reinit")
        self.tex = self.graph.add_node(TextureFileNode())
        self.nrm = self.graph.add_node(NormalMapNode())
        self.link = self.graph.link(self.tex.get_output("Color"), self.nrm.get_input("Color"))

    def test_initialize_is_idempotent(self):
        before = {key: pin.id for key, pin in self.nrm.pins.items()}
        self.graph.initialize_node(self.nrm)
        self.graph.initialize_node(self.nrm)
        after = {key: pin.id for key, pin in self.nrm.pins.items()}

        self.assertEqual(before, after)
        self.assertEqual(self.nrm.get_input("Color").links, [self.link])
        self.assertEqual(self.graph.links, [self.link])

    def test_type_change_replaces_pin(self):
        const = self.graph.add_node(ConstantNode(type='FLOAT'))
        math = self.graph.add_node(MathNode())
        old_pin = const.get_output("Value")
        self.graph.link(old_pin, math.get_input("A"))

        self.graph.set_property(const, 'type', 'FLOAT3')

        new_pin = const.get_output("Value")
        self.assertIsNot(new_pin, old_pin)
        self.assertNotEqual(new_pin.id, old_pin.id)
        self.assertEqual(new_pin.type, FLOAT3)
        self.assertFalse(math.get_input("A").is_linked)

    def test_mode_change_drops_undeclared_pins(self):
        height = self.graph.add_node(TextureNode())
        parallax = self.graph.add_node(ParallaxMapNode())
        link = self.graph.link(height.get_output("Texture"), parallax.get_input("Height Map"))
        self.assertNotIn("Min Layers", [p.name for p in parallax.inputs])

        self.graph.set_property(parallax, 'mode', 'STEEP_MAPPING')
        self.assertIn("Min Layers", [p.name for p in parallax.inputs])
        self.assertIn("Max Layers", [p.name for p in parallax.inputs])
        self.assertEqual(parallax.get_input("Height Map").links, [link])

        min_layers = parallax.get_input("Min Layers")
        self.graph.set_property(parallax, 'mode', 'MAPPING')
        self.assertNotIn("Min Layers", [p.name for p in parallax.inputs])
        with self.assertRaises(PinNotFoundError):
            self.graph.get_pin(min_layers.id)
        self.assertEqual(parallax.get_input("Height Map").links, [link])

    def test_non_pin_property_keeps_pins(self):
        before = dict(self.tex.pins)
        self.graph.set_property(self.tex, 'path', "other.dds")
        self.assertEqual(self.tex.path, "other.dds")
        self.assertEqual(self.tex.pins, before)

    def test_rejected_property_is_rolled_back(self):
        custom = self.graph.add_node(CustomFunctionNode(
            function_name="F", result_type='FLOAT', parameters=(("A", 'FLOAT'),)))
        a_pin = custom.get_input("A")

        with self.assertRaises(ValueError):
            self.graph.set_property(custom, 'parameters',
                                    (("A", 'FLOAT'), ("B", 'FLOAT'), ("C", 'BOGUS')))

        self.assertEqual(custom.properties['parameters'], (("A", 'FLOAT'),))
        self.assertEqual([p.name for p in custom.pins.values()], ["A", "Result"])
        self.assertIs(custom.get_input("A"), a_pin)

    def test_reordered_parameters_follow_declaration(self):
        custom = self.graph.add_node(CustomFunctionNode(
            function_name="F", result_type='FLOAT',
            parameters=(("A", 'FLOAT', "1.0"), ("B", 'FLOAT', "2.0"))))
        a_id = custom.get_input("A").id

        self.graph.set_property(custom, 'parameters',
                                (("B", 'FLOAT', "2.0"), ("A", 'FLOAT', "1.0")))

        self.assertEqual([p.name for p in custom.inputs], ["B", "A"])
        self.assertEqual(custom.get_input("A").id, a_id)
        source = compile_material(self.graph, roots=[custom]).source
        self.assertIn("float F(float b, float a)", source)
        self.assertIn("F(2.0, 1.0)", source)

    def test_input_and_output_may_share_a_name(self):
        custom = self.graph.add_node(CustomFunctionNode(
            name="Tinted", function_name="Tint", result_type='FLOAT4', body="return result * scale;",
            parameters=(("Result", 'FLOAT4', "float4(1.0, 1.0, 1.0, 1.0)"), ("Scale", 'FLOAT', "2.0"))))
        self.graph.link(self.tex.get_output("Color"), custom.get_input("Result"))

        self.assertEqual([p.key for p in custom.pins.values()], [
            ("Result", PinKind.INPUT), ("Scale", PinKind.INPUT), ("Result", PinKind.OUTPUT),
        ])
        self.assertIsNot(custom.get_input("Result"), custom.get_output("Result"))
        self.assertIs(custom.get_pin("Result"), custom.get_input("Result"))

        self.graph.initialize_node(custom)
        self.assertTrue(custom.get_input("Result").is_linked)

        source = compile_material(self.graph, roots=[custom]).source
        self.assertIn("float4 Tint(float4 result, float scale)", source)
        self.assertIn("float4 tinted = Tint(textureFile, 2.0);", source)

    def test_unknown_property(self):
        with self.assertRaises(TypeError):
            self.graph.set_property(self.tex, 'mode', 'X')
        with self.assertRaises(TypeError):
            TextureFileNode(mode='X')


class TestFingerprint(unittest.TestCase):
    def test_stable_and_sensitive(self):
        graph = NodeGraph("Hash")
        tex = graph.add_node(TextureFileNode(path="a.dds"))
        nrm = graph.add_node(NormalMapNode())
        graph.link(tex.get_output("Color"), nrm.get_input("Color"))

        first = graph.fingerprint()
        self.assertEqual(first, graph.fingerprint())

        graph.set_property(tex, 'path', "b.dds")
        second = graph.fingerprint()
        self.assertNotEqual(first, second)

        graph.remove_link(graph.links[0])
        self.assertNotEqual(second, graph.fingerprint())


def test_pin_lookup_errors(graph):
    node = graph.add_node(NormalMapNode())
    with pytest.raises(PinNotFoundError):
        node.get_pin("Missing")
    with pytest.raises(PinNotFoundError):
        node.get_output("Color")
    assert node.get_input("Color").kind == PinKind.INPUT
    assert node.get_input("Color").type == FLOAT3


def test_registry_creates_nodes(graph):
    node = graph.add_node(create_node("Math", name="Scale", operation='MUL', type='FLOAT4'))
    assert isinstance(node, MathNode)
    assert node.name == "Scale"
    assert node.get_output("Result").type == FLOAT4
    assert node.get_input("B").default_expression == "float4(1.0, 1.0, 1.0, 1.0)"

    with pytest.raises(GraphError):
        create_node("Voronoi")


@pytest.mark.parametrize("name,expected", [
    ("Base Color", "baseColor"),
    ("UV", "uv"),
    ("TextureFile", "textureFile"),
    ("Height Map", "heightMap"),
    ("2D Noise", "_2dNoise"),
    ("", "_"),
])
def test_sanitize_identifier(name, expected):
    assert sanitize_identifier(name) == expected
