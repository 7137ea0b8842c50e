from __future__ import annotations

import unittest

import numpy as np

from colors import parse_color, parse_hex_color, parse_rgb_color
from document import ROOT, GROUP, PATH, parse_document, rect_commands, ellipse_commands, absolute_first_move
from geometry import normalize_unit, parse_point_list
from paint import PaintServer
from parser import Node, parse_svg_string
from path_data import PathCommand, parse_path_data
from renderer import render
from svg_state import SVGState


def only_child(tree):
    children = list(tree.iter_descendants())
    return children[-1]


class TreeBuildingTests(unittest.TestCase):
    def test_root_carries_dimensions(self) -> None:
        tree = parse_document('<svg width="120" height="80"></svg>')
        self.assertEqual(tree.kind, ROOT)
        self.assertEqual(tree.attributes, {'width': 120.0, 'height': 80.0})

    def test_viewbox_supplies_missing_dimensions(self) -> None:
        tree = parse_document('<svg viewBox="0 0 64 32"/>')
        self.assertEqual((tree.attributes['width'], tree.attributes['height']), (64.0, 32.0))

    def test_units_are_normalized(self) -> None:
        tree = parse_document('<svg width="1in" height="72pt"></svg>')
        self.assertEqual(tree.attributes['width'], 96.0)
        self.assertAlmostEqual(tree.attributes['height'], 96.0)

    def test_rect_becomes_path_node(self) -> None:
        node = only_child(parse_document('<svg width="10" height="10"><rect x="1" y="2" width="3" height="4"/></svg>'))
        self.assertEqual(node.kind, PATH)
        self.assertEqual(node.tag, 'rect')
        self.assertEqual([c.kind for c in node.attributes['commands']], ['M', 'H', 'V', 'H', 'Z'])
        self.assertEqual(node.attributes['fill'], (0, 0, 0))
        self.assertIsNone(node.attributes['stroke'])

    def test_viewbox_maps_absolute_and_relative_operands(self) -> None:
        node = only_child(parse_document(
            '<svg width="200" height="200" viewBox="0 0 100 100"><path d="M10,10 l10,0 H50 v5"/></svg>'))
        self.assertEqual(node.attributes['commands'], [
            PathCommand('M', False, (20, 20)),
            PathCommand('L', True, (20, 0)),
            PathCommand('H', False, (100,)),
            PathCommand('V', True, (10,)),
        ])

    def test_leading_relative_move_is_measured_from_user_space_origin(self) -> None:
        svg = ('<svg width="100" height="100" viewBox="50 50 100 100">'
               '<path d="{}60,60 l20,0 l0,20 l-20,0 z" fill="red"/></svg>')
        absolute = render(parse_document(svg.format('M')))
        relative = render(parse_document(svg.format('m')))
        self.assertEqual(relative.pixel(20, 20), (255, 0, 0, 255))
        self.assertTrue(np.array_equal(absolute.buffer, relative.buffer))

    def test_only_the_first_relative_move_becomes_absolute(self) -> None:
        commands = absolute_first_move(parse_path_data("m1,2 l3,4 m5,6"))
        self.assertEqual(commands, [
            PathCommand('M', False, (1, 2)),
            PathCommand('L', True, (3, 4)),
            PathCommand('M', True, (5, 6)),
        ])

    def test_viewbox_scales_stroke_width(self) -> None:
        node = only_child(parse_document(
            '<svg width="200" height="200" viewBox="0 0 100 100">'
            '<line x1="0" y1="0" x2="10" y2="0" stroke="red" stroke-width="3"/></svg>'))
        self.assertEqual(node.attributes['stroke-width'], 6.0)

    def test_groups_and_inheritance(self) -> None:
        tree = parse_document(
            '<svg width="10" height="10"><g fill="blue" opacity="0.5">'
            '<circle cx="5" cy="5" r="2" fill-opacity="0.5"/></g></svg>')
        group, circle = list(tree.iter_descendants())
        self.assertEqual(group.kind, GROUP)
        self.assertEqual(circle.attributes['fill'], (0, 0, 255))
        self.assertAlmostEqual(circle.attributes['fill-opacity'], 0.25)

    def test_style_attribute_overrides_presentation_attribute(self) -> None:
        node = only_child(parse_document(
            '<svg width="10" height="10"><rect width="5" height="5" fill="red" style="fill: lime"/></svg>'))
        self.assertEqual(node.attributes['fill'], (0, 255, 0))

    def test_definitions_and_hidden_nodes_are_skipped(self) -> None:
        tree = parse_document(
            '<svg width="10" height="10">'
            '<defs><rect width="5" height="5"/></defs>'
            '<rect width="5" height="5" display="none"/>'
            '<rect width="5" height="5" visibility="hidden"/>'
            '<!-- <rect width="5" height="5"/> -->'
            '</svg>')
        self.assertEqual(list(tree.iter_descendants()), [])

    def test_unknown_elements_are_kept_as_leaves(self) -> None:
        tree = parse_document('<svg width="10" height="10"><text x="1">hi<tspan>!</tspan></text></svg>')
        nodes = list(tree.iter_descendants())
        self.assertEqual([n.kind for n in nodes], ['text'])
        self.assertEqual(nodes[0].attributes['x'], '1')

    def test_degenerate_shapes_produce_no_node(self) -> None:
        tree = parse_document(
            '<svg width="10" height="10"><circle r="0"/><rect width="0" height="5"/><polyline points="1,1"/></svg>')
        self.assertEqual(list(tree.iter_descendants()), [])

    def test_polygon_is_closed(self) -> None:
        node = only_child(parse_document('<svg width="10" height="10"><polygon points="0,0 5,0 5,5"/></svg>'))
        self.assertEqual([c.kind for c in node.attributes['commands']], ['M', 'L', 'L', 'Z'])


class ShapeCommandTests(unittest.TestCase):
    def test_rounded_rect_uses_cubic_corners(self) -> None:
        commands = rect_commands(0, 0, 20, 10, rx=4)
        self.assertEqual([c.kind for c in commands], ['M', 'H', 'C', 'V', 'C', 'H', 'C', 'V', 'C', 'Z'])
        self.assertEqual(commands[0].operands, (4, 0))
        self.assertEqual(commands[2].operands[-2:], (20, 4))

    def test_rect_radius_is_clamped(self) -> None:
        commands = rect_commands(0, 0, 10, 10, rx=50, ry=50)
        self.assertEqual(commands[0].operands, (5, 0))

    def test_ellipse_passes_through_axis_points(self) -> None:
        commands = ellipse_commands(10, 10, 5, 3)
        ends = [c.operands[-2:] for c in commands if c.kind == 'C']
        self.assertEqual(ends, [(10, 13), (5, 10), (10, 7), (15, 10)])


class SvgStateTests(unittest.TestCase):
    def test_missing_size_is_a_validation_error(self) -> None:
        state = SVGState(parse_svg_string('<svg></svg>'))
        self.assertFalse(state.is_valid())

    def test_preserve_aspect_ratio_meet_centers_content(self) -> None:
        state = SVGState(parse_svg_string('<svg width="200" height="100" viewBox="0 0 10 10"></svg>'))
        self.assertEqual(state.transform_point(0, 0), (50.0, 0.0))
        self.assertEqual(state.transform_point(10, 10), (150.0, 100.0))

    def test_set_viewport_recomputes_mapping(self) -> None:
        state = SVGState(parse_svg_string('<svg width="10" height="10" viewBox="0 0 10 10"></svg>'))
        state.set_viewport(40, 40)
        self.assertEqual(state.transform_point(5, 5), (20.0, 20.0))

    def test_unrenderable_path_data_is_a_validation_error(self) -> None:
        state = SVGState(parse_svg_string('<svg width="1" height="1"><path d="10,10 L2,2"/></svg>'))
        self.assertFalse(state.is_valid())

    def test_arcs_and_missing_attributes_are_warnings(self) -> None:
        state = SVGState(parse_svg_string(
            '<svg width="1" height="1"><path d="M0,0 A1,1 0 0 1 1,1"/><circle cx="1"/></svg>'))
        self.assertTrue(state.is_valid())
        self.assertEqual(len(state.validation_warnings), 2)

    def test_entries_before_root_are_dropped(self) -> None:
        state = SVGState(['<!DOCTYPE svg>', '<foo/>', '<svg width="2" height="2">', '<rect/>', '</svg>'])
        self.assertEqual(state.svg_tree.tag, 'svg')
        self.assertEqual([child.tag for child in state.svg_tree.children], ['rect'])

    def test_unbalanced_terminators_are_ignored(self) -> None:
        state = SVGState(parse_svg_string('<svg width="1" height="1"><g></rect><path d="M0,0"/></g></svg>'))
        group = state.svg_tree.children[0]
        self.assertEqual([child.tag for child in group.children], ['path'])


class ColorAndUnitTests(unittest.TestCase):
    def test_parse_colors(self) -> None:
        self.assertEqual(parse_color('#f00'), (255, 0, 0))
        self.assertEqual(parse_color('#00ff0080'), (0, 255, 0))
        self.assertEqual(parse_color('Navy'), (0, 0, 128))
        self.assertEqual(parse_rgb_color('rgb(0, 128, 255)'), (0, 128, 255))
        self.assertEqual(parse_rgb_color('rgb(100%, 0%, 50%)'), (255, 0, 128))
        self.assertEqual(parse_hex_color('#zzz'), (0, 0, 0))
        self.assertIsNone(parse_color('none'))
        self.assertIsNone(parse_color(''))

    def test_paint_server_reference(self) -> None:
        self.assertEqual(parse_color('url(#Grad1)'), PaintServer('Grad1'))
        self.assertEqual(parse_color("url('#g')"), PaintServer('g'))

    def test_current_color(self) -> None:
        node = Node('<rect color="red" fill="currentColor"/>')
        self.assertEqual(parse_color(node.get_attribute('fill'), node), (255, 0, 0))

    def test_current_color_is_case_insensitive(self) -> None:
        node = Node('<rect color=" Red " fill="currentColor"/>')
        self.assertEqual(parse_color(node.get_attribute('fill'), node), (255, 0, 0))
        tree = parse_document('<svg width="10" height="10"><g color="NAVY">'
                              '<rect width="10" height="10" fill="CurrentColor"/></g></svg>')
        self.assertEqual(render(tree).pixel(5, 5), (0, 0, 128, 255))

    def test_units(self) -> None:
        self.assertAlmostEqual(normalize_unit('2.54cm'), 96.0)
        self.assertEqual(normalize_unit('50%', 200, 100, axis='x'), 100.0)
        self.assertEqual(normalize_unit('50%', 200, 100, axis='y'), 50.0)
        self.assertEqual(normalize_unit('bogus'), 0.0)

    def test_point_list(self) -> None:
        self.assertEqual(parse_point_list('0,0 5,0 5 5 7'), [(0, 0), (5, 0), (5, 5)])


if __name__ == "__main__":
    unittest.main()
