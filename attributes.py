from __future__ import annotations
from parser import Node

SVG_DEFAULTS = {
    'fill': 'black',
    'stroke': 'none',
    'stroke-width': '1',
    'stroke-linejoin': 'miter',
    'stroke-miterlimit': '4',
    'opacity': '1',
    'fill-opacity': '1',
    'stroke-opacity': '1',
    'fill-rule': 'nonzero',
    'visibility': 'visible',
    'display': 'inline',
    'color': 'black',
    'preserveAspectRatio': 'xMidYMid meet',
}

def resolve_color_value(value: str, node: Node = None) -> str:
    if not value:
        return None

    value = value.strip()
    lowered = value.lower()

    if lowered == 'none':
        return 'none'

    if lowered == 'currentcolor':
        if node:
            return resolve_color_value(get_attribute_with_default(node, 'color'))
        return SVG_DEFAULTS['color']

    # url() fragments are case sensitive
    if lowered.startswith('url('):
        return value

    return lowered

def get_attribute_with_default(node: Node, attr_name: str, use_inheritance: bool = True) -> str:
    value = node.get_attribute(attr_name, None, use_inheritance)

    if value is not None:
        return value

    return SVG_DEFAULTS.get(attr_name, None)

def get_float_attribute(node: Node, attr_name: str, use_inheritance: bool = True) -> float:
    value = get_attribute_with_default(node, attr_name, use_inheritance)
    try:
        return float(value)
    except (ValueError, TypeError):
        return float(SVG_DEFAULTS[attr_name])
