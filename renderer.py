from __future__ import annotations
import logging
import math
from typing import List, Optional, Tuple
from diagnostics import Diagnostics, DocumentError, UNSUPPORTED_ELEMENT
from document import TreeNode, GROUP, PATH
from interpreter import PathInterpreter
from compositor import Compositor
from paint import Fill, Stroke, LineJoin, DEFAULT_MITER_LIMIT
from path_data import PathCommand
from raster import Raster
from rasterizer import Rasterizer

logger = logging.getLogger(__name__)

READING_ROOT = 'reading-root'
TRAVERSING = 'traversing'

UNKNOWN = 'unknown'

class Element:
    """Geometry and paint of one visited node."""

    def __init__(self, tag: str, commands: List[PathCommand] = (),
                 fill: Optional[Fill] = None, stroke: Optional[Stroke] = None):
        self.tag = tag
        self.commands = tuple(commands)
        self.fill = fill
        self.stroke = stroke

    @classmethod
    def from_node(cls, node: TreeNode) -> 'Element':
        if node.kind != PATH:
            return cls(UNKNOWN)

        attrs = node.attributes
        fill = None
        if attrs.get('fill') is not None:
            fill = Fill(attrs['fill'], attrs.get('fill-opacity', 1.0), attrs.get('fill-rule', 'nonzero'))

        stroke = None
        if attrs.get('stroke') is not None:
            join = LineJoin(attrs.get('stroke-linejoin', 'miter'),
                            attrs.get('stroke-miterlimit', DEFAULT_MITER_LIMIT))
            stroke = Stroke(attrs['stroke'], attrs.get('stroke-opacity', 1.0),
                            attrs.get('stroke-width', 1.0), join)

        return cls(PATH, attrs.get('commands', ()), fill, stroke)

class DocumentWalker:
    def __init__(self, diagnostics: Optional[Diagnostics] = None, anti_aliasing: bool = False,
                 tolerance: float = 0.25):
        self.diagnostics = diagnostics if diagnostics is not None else Diagnostics()
        self.anti_aliasing = anti_aliasing
        self.tolerance = tolerance
        self.state = READING_ROOT

    def render(self, tree: TreeNode, raster: Optional[Raster] = None) -> Raster:
        """Composite the tree onto `raster`, or onto a new transparent one."""
        self.state = READING_ROOT
        width, height = self._read_dimensions(tree)

        if raster is None:
            raster = Raster(width, height)
        elif (raster.width, raster.height) != (width, height):
            raise DocumentError(f"Raster is {raster.width}x{raster.height}, document is {width}x{height}")

        rasterizer = Rasterizer(width, height, self.anti_aliasing, self.tolerance)
        compositor = Compositor(rasterizer, self.diagnostics)
        interpreter = PathInterpreter(self.diagnostics)

        self.state = TRAVERSING
        for node in tree.iter_descendants():
            if node.kind == GROUP:
                continue

            element = Element.from_node(node)
            if element.tag == PATH:
                ops = interpreter.interpret(element.commands)
                compositor.composite(raster, ops, element.fill, element.stroke)
            else:
                self.diagnostics.warn(UNSUPPORTED_ELEMENT, f"Skipping unsupported element <{node.tag}>",
                                      tag=node.tag)

        logger.debug("Rendered %dx%d raster with %d diagnostic(s)", width, height, len(self.diagnostics))
        return raster

    def _read_dimensions(self, tree: TreeNode) -> Tuple[int, int]:
        dimensions = []
        for name in ('width', 'height'):
            value = tree.attributes.get(name)
            if value is None:
                raise DocumentError(f"Root element declares no {name}")
            try:
                value = float(value)
            except (TypeError, ValueError):
                raise DocumentError(f"Root {name} is not a number: {value!r}")
            if not math.isfinite(value) or int(value) <= 0:
                raise DocumentError(f"Root {name} must be positive, got {value}")
            dimensions.append(int(value))
        return dimensions[0], dimensions[1]

def render(tree: TreeNode, diagnostics: Optional[Diagnostics] = None, raster: Optional[Raster] = None,
           **options) -> Raster:
    return DocumentWalker(diagnostics, **options).render(tree, raster)
