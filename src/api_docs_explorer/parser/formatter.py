"""Pretty-printer for type expressions.

Breaks lines after openers and separators, indents nested structures and
normalizes whitespace outside string literals, so formatting an already
formatted expression returns it unchanged.
"""

from api_docs_explorer.parser.scanner import CLOSERS, OPENERS, QUOTES


def format_type(text: str, indent: int = 2) -> str:
    """Render a type expression across indented lines."""
    pad = " " * indent
    out: list[str] = []
    level = 0
    quote = None
    prev = ""
    pending_space = False

    def newline() -> str:
        return "\n" + pad * level

    def trim_tail() -> None:
        while out and out[-1].isspace():
            out.pop()
        if out:
            out[-1] = out[-1].rstrip()

    for ch in text:
        if quote is not None:
            out.append(ch)
            if ch == quote and prev != "\\":
                quote = None
        elif ch.isspace():
            pending_space = True
        elif ch in CLOSERS:
            level = max(level - 1, 0)
            trim_tail()
            out.append(newline() + ch)
            pending_space = False
        elif ch in ",;":
            trim_tail()
            out.append(ch + newline())
            pending_space = False
        elif ch == ":":
            trim_tail()
            out.append(": ")
            pending_space = False
        else:
            if pending_space and out and not out[-1].endswith((" ", "\n")):
                out.append(" ")
            pending_space = False
            if ch in OPENERS:
                level += 1
                out.append(ch + newline())
            else:
                out.append(ch)
                if ch in QUOTES:
                    quote = ch
        prev = ch

    lines = "".join(out).split("\n")
    return "\n".join(line.rstrip() for line in lines).strip()
