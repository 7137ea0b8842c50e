from __future__ import annotations
import logging

logger = logging.getLogger(__name__)

UNSUPPORTED_ELEMENT = 'unsupported-element'
UNSUPPORTED_SEGMENT = 'unsupported-segment'
PAINT_FALLBACK = 'paint-resolution-fallback'

class DocumentError(Exception):
    """The source document is corrupt and cannot be rendered."""

class Diagnostic:
    def __init__(self, code: str, message: str, context: dict = None):
        self.code = code
        self.message = message
        self.context = context or {}

    def __repr__(self):
        return f"Diagnostic({self.code!r}, {self.message!r})"

class Diagnostics:
    """Collects non-fatal render conditions and forwards them to logging."""

    def __init__(self, log: logging.Logger = None):
        self.entries: list[Diagnostic] = []
        self.log = log or logger

    def warn(self, code: str, message: str, **context) -> Diagnostic:
        entry = Diagnostic(code, message, context)
        self.entries.append(entry)
        self.log.warning("%s: %s", code, message)
        return entry

    def codes(self) -> list[str]:
        return [entry.code for entry in self.entries]

    def __len__(self):
        return len(self.entries)

    def __iter__(self):
        return iter(self.entries)

    def print_report(self):
        if not self.entries:
            print("Render diagnostics: [OK] None")
            return

        print("Render diagnostics: [WARNING]")
        for entry in self.entries:
            print(f"  {entry.code}: {entry.message}")
