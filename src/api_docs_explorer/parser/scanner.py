"""Delimiter and quote tracking for type-expression text.

Shared by the shape parser, the formatter and the registry extractor so
that none of them splits inside nested structures or string literals.
"""

OPENERS = {"(": "parens", "{": "braces", "[": "brackets"}
CLOSERS = {")": "parens", "}": "braces", "]": "brackets"}
QUOTES = ("'", '"')


class DelimiterScanner:
    """Tracks nesting depth and string state one character at a time.

    The properties describe the state *before* the next character is fed.
    Unbalanced closers are ignored instead of driving a counter negative.
    """

    def __init__(self):
        self.parens = 0
        self.braces = 0
        self.brackets = 0
        self.quote: str | None = None
        self._prev = ""

    @property
    def in_string(self) -> bool:
        return self.quote is not None

    @property
    def depth(self) -> int:
        return self.parens + self.braces + self.brackets

    @property
    def at_top_level(self) -> bool:
        return self.quote is None and self.depth == 0

    def feed(self, ch: str) -> None:
        if self.quote is not None:
            # A backslash right before the quote keeps the string open.
            if ch == self.quote and self._prev != "\\":
                self.quote = None
        elif ch in QUOTES:
            self.quote = ch
        elif ch in OPENERS:
            counter = OPENERS[ch]
            setattr(self, counter, getattr(self, counter) + 1)
        elif ch in CLOSERS:
            counter = CLOSERS[ch]
            setattr(self, counter, max(getattr(self, counter) - 1, 0))
        self._prev = ch


def split_top_level(text: str, separators: str = ",;") -> list[str]:
    """Split ``text`` at separator characters found outside any nesting."""
    parts = []
    current: list[str] = []
    scanner = DelimiterScanner()
    for ch in text:
        if ch in separators and scanner.at_top_level:
            parts.append("".join(current))
            current = []
        else:
            current.append(ch)
        scanner.feed(ch)
    parts.append("".join(current))
    return parts


def find_block_end(text: str, start: int) -> int:
    """Return the index closing the delimiter at ``start``, or -1."""
    if start >= len(text) or text[start] not in OPENERS:
        return -1
    scanner = DelimiterScanner()
    for index in range(start, len(text)):
        scanner.feed(text[index])
        if index > start and scanner.at_top_level:
            return index
    return -1


def strip_comments(text: str) -> str:
    """Remove ``//`` and ``/* */`` comments that are not inside a string."""
    out = []
    scanner = DelimiterScanner()
    index = 0
    while index < len(text):
        if not scanner.in_string:
            if text.startswith("//", index):
                end = text.find("\n", index)
                index = len(text) if end == -1 else end
                continue
            if text.startswith("/*", index):
                end = text.find("*/", index + 2)
                index = len(text) if end == -1 else end + 2
                continue
        ch = text[index]
        out.append(ch)
        scanner.feed(ch)
        index += 1
    return "".join(out)
