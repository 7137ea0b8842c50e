from __future__ import annotations
import re

xml_pattern = re.compile(r'(\<[^>]*?\>)', flags=re.DOTALL | re.MULTILINE)
comment_pattern = re.compile(r'\<!--.*?--\>', flags=re.DOTALL | re.MULTILINE)
first_word_pattern = re.compile(r'^\s*[/!?]*\s*([\w:-]+)')

INHERITED_ATTRIBUTES = {
    'fill', 'fill-opacity', 'fill-rule',
    'stroke', 'stroke-width', 'stroke-opacity', 'stroke-linejoin', 'stroke-miterlimit',
    'color', 'visibility',
}

def is_self_terminating(svg_value: str) -> bool:
    return svg_value.rstrip().endswith('/>')

def is_terminator(svg_value: str) -> bool:
    return svg_value.strip().startswith('</')

def is_declaration(svg_value: str) -> bool:
    content = svg_value.lstrip()
    return content.startswith('<?') or content.startswith('<!')

def get_tag(svg_value: str) -> str:
    content = svg_value.strip().lstrip('<').lstrip('/').rstrip('>').rstrip('/')
    match = first_word_pattern.search(content)
    if match:
        return match.group(1)
    return ""

def parse_attributes(element: str) -> dict:
    attributes = {}

    content = element.strip()
    if content.startswith('</'):
        return attributes
    content = content.lstrip('<').rstrip('>').rstrip('/').rstrip()

    parts = content.split(None, 1)
    if len(parts) < 2:
        return attributes

    # 0: key, 1: waiting for quote, 2: inside value, 3: escaped char
    state = 0
    quote = ''
    accumulator = ""
    current_key = ""

    for char in parts[1]:
        if state == 0:
            if char == '=':
                current_key = accumulator.strip()
                accumulator = ""
                state = 1
            elif char.isspace():
                accumulator = ""
            else:
                accumulator += char
        elif state == 1:
            if char in '"\'':
                quote = char
                state = 2
        elif state == 2:
            if char == '\\':
                state = 3
            elif char == quote:
                attributes[current_key] = accumulator
                accumulator = ""
                current_key = ""
                state = 0
            else:
                accumulator += char
        elif state == 3:
            accumulator += char
            state = 2

    return attributes

def parse_style(style: str) -> dict:
    declarations = {}
    for declaration in style.split(';'):
        if ':' not in declaration:
            continue
        name, value = declaration.split(':', 1)
        declarations[name.strip()] = value.strip()
    return declarations

def parse_svg_string(data: str) -> list[str]:
    entries = xml_pattern.findall(comment_pattern.sub('', data))
    return [x for x in entries if not is_declaration(x)]

def parse_svg_file(path: str) -> list[str]:
    with open(path, 'r', encoding='utf-8') as file:
        return parse_svg_string(file.read())

class Node:
    def __init__(self, element: str):
        self.element = element
        self.tag = get_tag(element)
        self.attributes = parse_attributes(element)
        if 'style' in self.attributes:
            self.attributes.update(parse_style(self.attributes.pop('style')))
        self.children = []
        self.parent = None

    def add_child(self, element: str) -> 'Node':
        return self.add_node_child(Node(element))

    def add_node_child(self, new_node: 'Node') -> 'Node':
        new_node.parent = self
        self.children.append(new_node)
        return new_node

    def compare_tag(self, element: str) -> bool:
        return self.tag == get_tag(element)

    def get_attribute(self, attr_name: str, default: str = None, use_inheritance: bool = True) -> str:
        if attr_name in self.attributes:
            return self.attributes[attr_name]

        if use_inheritance and attr_name in INHERITED_ATTRIBUTES:
            current = self.parent
            while current is not None:
                if attr_name in current.attributes:
                    return current.attributes[attr_name]
                current = current.parent

        return default
