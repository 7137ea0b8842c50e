from __future__ import annotations
import math
from parser import Node, is_self_terminating, is_terminator, get_tag
from geometry import normalize_unit, parse_number_with_unit
from diagnostics import DocumentError
from path_data import parse_path_data, ARC

NUMERIC_ATTRIBUTES = ('x', 'y', 'width', 'height', 'cx', 'cy', 'r', 'rx', 'ry',
                      'x1', 'y1', 'x2', 'y2', 'stroke-width', 'opacity')

# attributes without which a shape paints nothing
REQUIRED_ATTRIBUTES = {
    'path': ('d',),
    'rect': ('width', 'height'),
    'circle': ('r',),
    'ellipse': ('rx', 'ry'),
    'polyline': ('points',),
    'polygon': ('points',),
}

def _align_offset(align: str, axis: str, spare: float) -> float:
    if f'{axis}min' in align:
        return 0.0
    if f'{axis}max' in align:
        return spare
    return spare / 2.0

def _parse_viewbox(value: str):
    parts = value.replace(',', ' ').split()
    if len(parts) < 4:
        return None
    try:
        return tuple(float(p) for p in parts[:4])
    except ValueError:
        return None

def _root_length(attrs: dict, name: str):
    # percentages need a containing block, which a standalone root does not have
    value = attrs.get(name)
    if value is None or value.strip().endswith('%'):
        return None
    return normalize_unit(value)

class SVGState:
    """Root <svg> element, its Node tree and the viewBox-to-canvas mapping."""

    def __init__(self, entries: list[str] = ()):
        self.svg_tree: Node = None
        self.viewport_width = None
        self.viewport_height = None
        self.viewbox = None
        self.viewbox_scale_x = 1.0
        self.viewbox_scale_y = 1.0
        self.viewbox_offset_x = 0.0
        self.viewbox_offset_y = 0.0
        self.validation_errors = []
        self.validation_warnings = []
        self._build_tree(entries)
        self._read_root()
        self.validate()

    def _build_tree(self, entries: list[str]):
        remaining = iter(entries)

        for entry in remaining:
            if get_tag(entry) == "svg":
                self.svg_tree = Node(entry)
                break

        if self.svg_tree is None or is_self_terminating(self.svg_tree.element):
            return

        open_node = self.svg_tree
        for entry in remaining:
            if is_terminator(entry):
                # a stray closing tag does not pop anything
                if open_node.compare_tag(entry):
                    open_node = open_node.parent
                    if open_node is None:
                        return
            elif is_self_terminating(entry):
                open_node.add_child(entry)
            else:
                open_node = open_node.add_node_child(Node(entry))

    def _read_root(self):
        if self.svg_tree is None:
            return

        attrs = self.svg_tree.attributes
        self.viewport_width = _root_length(attrs, 'width')
        self.viewport_height = _root_length(attrs, 'height')
        if 'viewBox' in attrs:
            self.viewbox = _parse_viewbox(attrs['viewBox'])

        # a viewBox alone still fixes the canvas size
        if self.viewbox is not None:
            if self.viewport_width is None:
                self.viewport_width = self.viewbox[2]
            if self.viewport_height is None:
                self.viewport_height = self.viewbox[3]

        self._update_mapping()

    def set_viewport(self, width: float = None, height: float = None):
        if width is not None:
            self.viewport_width = float(width)
        if height is not None:
            self.viewport_height = float(height)
        self._update_mapping()

    def _update_mapping(self):
        self.viewbox_scale_x = self.viewbox_scale_y = 1.0
        self.viewbox_offset_x = self.viewbox_offset_y = 0.0
        if self.viewbox is None or self.viewport_width is None or self.viewport_height is None:
            return

        min_x, min_y, box_width, box_height = self.viewbox
        sx = self.viewport_width / box_width if box_width > 0 else 1.0
        sy = self.viewport_height / box_height if box_height > 0 else 1.0

        aspect = self.svg_tree.get_attribute('preserveAspectRatio', 'xMidYMid meet', False).split()
        align = aspect[0].lower() if aspect else 'none'
        if align == 'none':
            self.viewbox_scale_x, self.viewbox_scale_y = sx, sy
            self.viewbox_offset_x = -min_x * sx
            self.viewbox_offset_y = -min_y * sy
            return

        slicing = len(aspect) > 1 and aspect[1].lower() == 'slice'
        scale = max(sx, sy) if slicing else min(sx, sy)
        self.viewbox_scale_x = self.viewbox_scale_y = scale
        self.viewbox_offset_x = _align_offset(align, 'x', self.viewport_width - box_width * scale) - min_x * scale
        self.viewbox_offset_y = _align_offset(align, 'y', self.viewport_height - box_height * scale) - min_y * scale

    def user_space_size(self) -> tuple[float, float]:
        if self.viewbox is not None:
            return (self.viewbox[2], self.viewbox[3])
        return (self.viewport_width, self.viewport_height)

    def transform_point(self, x: float, y: float) -> tuple[float, float]:
        return (x * self.viewbox_scale_x + self.viewbox_offset_x,
                y * self.viewbox_scale_y + self.viewbox_offset_y)

    def scale_vector(self, dx: float, dy: float) -> tuple[float, float]:
        return (dx * self.viewbox_scale_x, dy * self.viewbox_scale_y)

    def transform_length(self, length: float, is_horizontal: bool = True) -> float:
        return length * (self.viewbox_scale_x if is_horizontal else self.viewbox_scale_y)

    def validate(self):
        """Collect problems that stop rendering (errors) or drop content (warnings)."""
        self.validation_errors = []
        self.validation_warnings = []

        if self.svg_tree is None:
            self.validation_errors.append("No root <svg> element found")
            return

        for name, size in (('width', self.viewport_width), ('height', self.viewport_height)):
            if size is None:
                self.validation_errors.append(f"Root <svg> declares no {name}")
            elif size <= 0:
                self.validation_errors.append(f"Canvas {name} must be positive, got {size}")

        if self.viewbox is not None and (self.viewbox[2] <= 0 or self.viewbox[3] <= 0):
            self.validation_errors.append(f"viewBox has no area: {self.viewbox}")

        for child in self.svg_tree.children:
            self._check_node(child)

    def _check_node(self, node: Node):
        missing = [a for a in REQUIRED_ATTRIBUTES.get(node.tag, ()) if a not in node.attributes]
        if missing:
            self.validation_warnings.append(f"<{node.tag}> lacks {', '.join(missing)} and paints nothing")

        if node.tag == 'path' and 'd' in node.attributes:
            self._check_path_data(node.attributes['d'])

        for attr in NUMERIC_ATTRIBUTES:
            if attr not in node.attributes:
                continue
            number, _ = parse_number_with_unit(node.attributes[attr])
            if not math.isfinite(number):
                self.validation_warnings.append(f"<{node.tag}> {attr}={node.attributes[attr]!r} is not finite")

        for child in node.children:
            self._check_node(child)

    def _check_path_data(self, d: str):
        try:
            commands = parse_path_data(d)
        except DocumentError as e:
            self.validation_errors.append(f"<path> data cannot be rendered: {e}")
            return
        if any(c.kind == ARC for c in commands):
            self.validation_warnings.append("<path> uses arc segments, which are skipped")

    def is_valid(self) -> bool:
        return not self.validation_errors

    def print_validation_report(self):
        if self.is_valid() and not self.validation_warnings:
            print("SVG validation: [OK] Valid")
            return

        for label, entries in (("ERROR", self.validation_errors), ("WARNING", self.validation_warnings)):
            if entries:
                print(f"SVG validation: [{label}] {len(entries)} issue(s):")
                for entry in entries:
                    print(f"  {label}: {entry}")
