from __future__ import annotations
import math
import re
from typing import List, Tuple
from parser import Node

INCHES_TO_PX = 96.0
CM_TO_PX = INCHES_TO_PX / 2.54
MM_TO_PX = CM_TO_PX / 10
PT_TO_PX = INCHES_TO_PX / 72.0
PC_TO_PX = PT_TO_PX * 12
DEFAULT_FONT_SIZE = 16.0

# 4/3 * (sqrt(2) - 1), control distance for a quarter-circle cubic
KAPPA = 0.5522847498307936

number_pattern = re.compile(r'^([-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?)\s*([a-zA-Z%]*)$')
point_separator_pattern = re.compile(r'[\s,]+')

def parse_number_with_unit(value: str) -> tuple[float, str]:
    if not value or not isinstance(value, str):
        return (0.0, "")

    match = number_pattern.match(value.strip())
    if not match:
        return (0.0, "")

    return (float(match.group(1)), match.group(2) or "")

def normalize_unit(value: str, viewport_width: float = None, viewport_height: float = None,
                   axis: str = None, font_size: float = None) -> float:
    num_value, unit = parse_number_with_unit(value)
    unit = unit.lower()

    if unit in ("", "px"):
        return num_value
    elif unit == "pt":
        return num_value * PT_TO_PX
    elif unit == "pc":
        return num_value * PC_TO_PX
    elif unit == "in":
        return num_value * INCHES_TO_PX
    elif unit == "cm":
        return num_value * CM_TO_PX
    elif unit == "mm":
        return num_value * MM_TO_PX
    elif unit == "em":
        return num_value * (font_size or DEFAULT_FONT_SIZE)
    elif unit == "ex":
        return num_value * (font_size or DEFAULT_FONT_SIZE) * 0.5
    elif unit == "%":
        if axis == "x" and viewport_width is not None:
            return (num_value / 100.0) * viewport_width
        if axis == "y" and viewport_height is not None:
            return (num_value / 100.0) * viewport_height
        if viewport_width is not None and viewport_height is not None:
            # percentages of a non-directional length use the normalized diagonal
            diagonal = math.sqrt(viewport_width ** 2 + viewport_height ** 2) / math.sqrt(2)
            return (num_value / 100.0) * diagonal
        return num_value

    return num_value

def get_normalized_attribute(node: Node, attr_name: str, default: float = 0.0,
                             viewport_width: float = None, viewport_height: float = None,
                             axis: str = None, use_inheritance: bool = False) -> float:
    value = node.get_attribute(attr_name, None, use_inheritance)
    if value is None:
        return default

    return normalize_unit(value, viewport_width, viewport_height, axis)

def parse_point_list(points_str: str) -> List[Tuple[float, float]]:
    if not points_str:
        return []

    coords = []
    for part in point_separator_pattern.split(points_str.strip()):
        if not part:
            continue
        try:
            coords.append(float(part))
        except ValueError:
            break

    return [(coords[i], coords[i + 1]) for i in range(0, len(coords) - 1, 2)]

def clamp(x, minx, maxx):
    return max(min(x, maxx), minx)
