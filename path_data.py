from __future__ import annotations
import re
from diagnostics import DocumentError

MOVE = 'M'
LINE = 'L'
HORIZONTAL_LINE = 'H'
VERTICAL_LINE = 'V'
QUADRATIC = 'Q'
CUBIC = 'C'
SMOOTH_QUADRATIC = 'T'
SMOOTH_CUBIC = 'S'
ARC = 'A'
CLOSE = 'Z'

COMMAND_ARITY = {
    MOVE: 2,
    LINE: 2,
    HORIZONTAL_LINE: 1,
    VERTICAL_LINE: 1,
    QUADRATIC: 4,
    CUBIC: 6,
    SMOOTH_QUADRATIC: 2,
    SMOOTH_CUBIC: 4,
    ARC: 7,
    CLOSE: 0,
}

token_pattern = re.compile(
    r'(?P<command>[MmLlHhVvCcSsQqTtAaZz])'
    r'|(?P<number>[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?)'
    r'|(?P<separator>[\s,]+)'
    r'|(?P<junk>[^MmLlHhVvCcSsQqTtAaZz\s,]+)'
)

class PathCommand:
    def __init__(self, kind: str, relative: bool = False, operands=()):
        self.kind = kind
        self.relative = relative
        self.operands = tuple(operands)

    def __eq__(self, other):
        if not isinstance(other, PathCommand):
            return NotImplemented
        return (self.kind == other.kind and self.relative == other.relative
                and self.operands == other.operands)

    def __repr__(self):
        letter = self.kind.lower() if self.relative else self.kind
        return f"PathCommand({letter!r}, {list(self.operands)!r})"

def tokenize_path_data(path_str: str) -> list:
    tokens = []
    for match in token_pattern.finditer(path_str):
        if match.group('command'):
            tokens.append(('command', match.group('command')))
        elif match.group('number'):
            tokens.append(('number', float(match.group('number'))))
        elif match.group('junk'):
            # kept verbatim so the interpreter can reject the operand
            tokens.append(('number', match.group('junk')))
    return tokens

def parse_path_data(path_str: str) -> list[PathCommand]:
    """Split a path-data string into PathCommands.

    Operands are grouped by the arity of each command letter. Extra groups
    after a moveto become implicit linetos, as the path grammar requires.
    A trailing incomplete group is kept as-is and rejected later by the
    interpreter.
    """
    if not path_str or not path_str.strip():
        return []

    tokens = tokenize_path_data(path_str)
    if tokens and tokens[0][0] != 'command':
        raise DocumentError(f"Path data must begin with a command: {path_str[:20]!r}")

    commands = []
    i = 0
    while i < len(tokens):
        letter = tokens[i][1]
        i += 1
        numbers = []
        while i < len(tokens) and tokens[i][0] == 'number':
            numbers.append(tokens[i][1])
            i += 1

        kind = letter.upper()
        relative = letter.islower()
        arity = COMMAND_ARITY[kind]

        if arity == 0 or not numbers:
            commands.append(PathCommand(kind, relative, numbers))
            continue

        for start in range(0, len(numbers), arity):
            group = numbers[start:start + arity]
            group_kind = LINE if kind == MOVE and start > 0 else kind
            commands.append(PathCommand(group_kind, relative, group))

    return commands
