"""Normalized document tree handed to the renderer.

Builds TreeNodes from a parsed SVGState: groups keep their children, basic
shapes and <path> become 'path' nodes carrying PathCommands in canvas
coordinates plus resolved paint attributes, and anything else is kept as
a leaf of its own kind so the renderer can report it.
"""
from __future__ import annotations
from typing import Iterator, List, Optional
from parser import Node, parse_svg_file, parse_svg_string
from svg_state import SVGState
from attributes import get_attribute_with_default, get_float_attribute
from colors import parse_color
from geometry import get_normalized_attribute, normalize_unit, parse_point_list, clamp, KAPPA
from path_data import (PathCommand, parse_path_data, MOVE, LINE, HORIZONTAL_LINE, VERTICAL_LINE,
                       CUBIC, CLOSE, ARC)

ROOT = 'root'
GROUP = 'group'
PATH = 'path'

GROUP_TAGS = {'g', 'a', 'switch'}
SHAPE_TAGS = {'path', 'rect', 'circle', 'ellipse', 'line', 'polyline', 'polygon'}
# containers that never paint directly
DEFINITION_TAGS = {
    'defs', 'title', 'desc', 'metadata', 'style', 'script', 'symbol', 'marker',
    'clipPath', 'mask', 'pattern', 'linearGradient', 'radialGradient', 'filter',
}

class TreeNode:
    def __init__(self, kind: str, attributes: dict = None, tag: str = None):
        self.kind = kind
        self.tag = tag or kind
        self.attributes = attributes or {}
        self.children: List['TreeNode'] = []

    def add_child(self, node: 'TreeNode') -> 'TreeNode':
        self.children.append(node)
        return node

    def iter_preorder(self) -> Iterator['TreeNode']:
        yield self
        for child in self.children:
            yield from child.iter_preorder()

    def iter_descendants(self) -> Iterator['TreeNode']:
        for child in self.children:
            yield from child.iter_preorder()

    def __repr__(self):
        return f"TreeNode({self.kind!r}, tag={self.tag!r}, children={len(self.children)})"

def load_document(path: str) -> TreeNode:
    return build_tree(SVGState(parse_svg_file(path)))

def parse_document(data: str) -> TreeNode:
    return build_tree(SVGState(parse_svg_string(data)))

def build_tree(svg_state: SVGState) -> TreeNode:
    root = TreeNode(ROOT, tag='svg')
    if svg_state.viewport_width is not None:
        root.attributes['width'] = svg_state.viewport_width
    if svg_state.viewport_height is not None:
        root.attributes['height'] = svg_state.viewport_height

    if svg_state.svg_tree is not None:
        for child in svg_state.svg_tree.children:
            _append_node(root, child, svg_state)
    return root

def _is_invisible(node: Node) -> bool:
    return get_attribute_with_default(node, 'visibility').strip() in ('hidden', 'collapse')

def _append_node(parent: TreeNode, node: Node, svg_state: SVGState):
    if node.tag in DEFINITION_TAGS:
        return
    if node.get_attribute('display', 'inline', use_inheritance=False).strip() == 'none':
        return

    if node.tag in GROUP_TAGS or node.tag == 'svg':
        group = parent.add_child(TreeNode(GROUP, tag=node.tag))
        for child in node.children:
            _append_node(group, child, svg_state)
    elif node.tag in SHAPE_TAGS:
        if _is_invisible(node):
            return
        commands = absolute_first_move(shape_commands(node, *svg_state.user_space_size()))
        if commands:
            attributes = paint_attributes(node, svg_state)
            attributes['commands'] = [map_command(c, svg_state) for c in commands]
            parent.add_child(TreeNode(PATH, attributes, tag=node.tag))
    else:
        parent.add_child(TreeNode(node.tag, dict(node.attributes)))

def paint_attributes(node: Node, svg_state: SVGState) -> dict:
    opacity = _effective_opacity(node)
    stroke_width = normalize_unit(get_attribute_with_default(node, "stroke-width"), *svg_state.user_space_size())

    return {
        'fill': parse_color(get_attribute_with_default(node, 'fill'), node),
        'fill-opacity': opacity * clamp(get_float_attribute(node, 'fill-opacity'), 0.0, 1.0),
        'fill-rule': get_attribute_with_default(node, 'fill-rule').strip(),
        'stroke': parse_color(get_attribute_with_default(node, 'stroke'), node),
        'stroke-opacity': opacity * clamp(get_float_attribute(node, 'stroke-opacity'), 0.0, 1.0),
        'stroke-width': svg_state.transform_length(stroke_width),
        'stroke-linejoin': get_attribute_with_default(node, 'stroke-linejoin').strip(),
        'stroke-miterlimit': get_float_attribute(node, 'stroke-miterlimit'),
    }

def _effective_opacity(node: Node) -> float:
    # group opacity is folded into each painted descendant
    opacity = 1.0
    current = node
    while current is not None:
        opacity *= clamp(get_float_attribute(current, "opacity", use_inheritance=False), 0.0, 1.0)
        current = current.parent
    return opacity

def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)

def map_command(command: PathCommand, svg_state: SVGState) -> PathCommand:
    """Apply the viewBox mapping to one command's operands.

    Absolute coordinates are scaled and offset, relative ones only scaled.
    Non-numeric operands pass through untouched.
    """
    if svg_state.viewbox is None or not all(_is_number(v) for v in command.operands):
        return command

    operands = list(command.operands)
    if command.kind == HORIZONTAL_LINE and operands:
        x = operands[0]
        operands[0] = x * svg_state.viewbox_scale_x + (0.0 if command.relative else svg_state.viewbox_offset_x)
    elif command.kind == VERTICAL_LINE and operands:
        y = operands[0]
        operands[0] = y * svg_state.viewbox_scale_y + (0.0 if command.relative else svg_state.viewbox_offset_y)
    elif command.kind == ARC and len(operands) == 7:
        operands[0], operands[1] = svg_state.scale_vector(operands[0], operands[1])
        operands[5:7] = _map_pair(operands[5], operands[6], command.relative, svg_state)
    else:
        for i in range(0, len(operands) - 1, 2):
            operands[i:i + 2] = _map_pair(operands[i], operands[i + 1], command.relative, svg_state)

    return PathCommand(command.kind, command.relative, operands)

def absolute_first_move(commands: List[PathCommand]) -> List[PathCommand]:
    # a leading 'm' is measured from the user-space origin
    if commands and commands[0].kind == MOVE and commands[0].relative:
        first = commands[0]
        return [PathCommand(MOVE, False, first.operands)] + commands[1:]
    return commands

def _map_pair(x: float, y: float, relative: bool, svg_state: SVGState):
    if relative:
        return svg_state.scale_vector(x, y)
    return svg_state.transform_point(x, y)

def shape_commands(node: Node, viewport_w: Optional[float], viewport_h: Optional[float]) -> List[PathCommand]:
    def length(name, axis=None):
        return get_normalized_attribute(node, name, 0.0, viewport_w, viewport_h, axis)

    if node.tag == 'path':
        return parse_path_data(node.get_attribute('d', '', use_inheritance=False))

    if node.tag == 'rect':
        return rect_commands(length('x', 'x'), length('y', 'y'), length('width', 'x'), length('height', 'y'),
                             length('rx', 'x'), length('ry', 'y'))

    if node.tag == 'circle':
        r = length('r')
        return ellipse_commands(length('cx', 'x'), length('cy', 'y'), r, r)

    if node.tag == 'ellipse':
        return ellipse_commands(length('cx', 'x'), length('cy', 'y'), length('rx', 'x'), length('ry', 'y'))

    if node.tag == 'line':
        return [PathCommand(MOVE, False, (length('x1', 'x'), length('y1', 'y'))),
                PathCommand(LINE, False, (length('x2', 'x'), length('y2', 'y')))]

    points = parse_point_list(node.get_attribute('points', '', use_inheritance=False))
    if len(points) < 2:
        return []
    commands = [PathCommand(MOVE, False, points[0])]
    commands.extend(PathCommand(LINE, False, p) for p in points[1:])
    if node.tag == 'polygon':
        commands.append(PathCommand(CLOSE))
    return commands

def rect_commands(x: float, y: float, width: float, height: float,
                  rx: float = 0.0, ry: float = 0.0) -> List[PathCommand]:
    if width <= 0 or height <= 0:
        return []

    if rx > 0 and ry == 0:
        ry = rx
    elif ry > 0 and rx == 0:
        rx = ry
    rx = min(max(rx, 0.0), width / 2.0)
    ry = min(max(ry, 0.0), height / 2.0)

    if rx == 0 or ry == 0:
        return [
            PathCommand(MOVE, False, (x, y)),
            PathCommand(HORIZONTAL_LINE, False, (x + width,)),
            PathCommand(VERTICAL_LINE, False, (y + height,)),
            PathCommand(HORIZONTAL_LINE, False, (x,)),
            PathCommand(CLOSE),
        ]

    kx = rx * KAPPA
    ky = ry * KAPPA
    right = x + width
    bottom = y + height
    return [
        PathCommand(MOVE, False, (x + rx, y)),
        PathCommand(HORIZONTAL_LINE, False, (right - rx,)),
        PathCommand(CUBIC, False, (right - rx + kx, y, right, y + ry - ky, right, y + ry)),
        PathCommand(VERTICAL_LINE, False, (bottom - ry,)),
        PathCommand(CUBIC, False, (right, bottom - ry + ky, right - rx + kx, bottom, right - rx, bottom)),
        PathCommand(HORIZONTAL_LINE, False, (x + rx,)),
        PathCommand(CUBIC, False, (x + rx - kx, bottom, x, bottom - ry + ky, x, bottom - ry)),
        PathCommand(VERTICAL_LINE, False, (y + ry,)),
        PathCommand(CUBIC, False, (x, y + ry - ky, x + rx - kx, y, x + rx, y)),
        PathCommand(CLOSE),
    ]

def ellipse_commands(cx: float, cy: float, rx: float, ry: float) -> List[PathCommand]:
    if rx <= 0 or ry <= 0:
        return []

    kx = rx * KAPPA
    ky = ry * KAPPA
    return [
        PathCommand(MOVE, False, (cx + rx, cy)),
        PathCommand(CUBIC, False, (cx + rx, cy + ky, cx + kx, cy + ry, cx, cy + ry)),
        PathCommand(CUBIC, False, (cx - kx, cy + ry, cx - rx, cy + ky, cx - rx, cy)),
        PathCommand(CUBIC, False, (cx - rx, cy - ky, cx - kx, cy - ry, cx, cy - ry)),
        PathCommand(CUBIC, False, (cx + kx, cy - ry, cx + rx, cy - ky, cx + rx, cy)),
        PathCommand(CLOSE),
    ]
