"""Backward scanning helpers: tail extraction and the string-literal gate.

The tail extractor is a heuristic, not a tokenizer. It only needs to isolate the
right-most path or call expression that ends at the caret.
"""

QUOTES = ("'", '"')

_STOP_CHARS = frozenset("+-*/%=!<>&|^~?:,;{}")


def is_escaped(text: str, index: int) -> bool:
    """True if the character at `index` is preceded by an odd run of backslashes."""
    backslashes = 0
    i = index - 1
    while i >= 0 and text[i] == "\\":
        backslashes += 1
        i -= 1
    return backslashes % 2 == 1


def is_inside_string(text: str) -> bool:
    """True if `text` ends inside a quoted string literal.

    Unescaped single and double quotes are counted independently; an odd count
    of either means the end of the text sits inside a literal.
    """
    counts = {quote: 0 for quote in QUOTES}
    for i, ch in enumerate(text):
        if ch in counts and not is_escaped(text, i):
            counts[ch] += 1
    return any(count % 2 == 1 for count in counts.values())


def _is_stop_char(text: str, index: int) -> bool:
    ch = text[index]
    if ch.isspace():
        return True
    if ch == "?" and index + 1 < len(text) and text[index + 1] == ".":
        # optional chaining operator belongs to the path
        return False
    return ch in _STOP_CHARS


def extract_tail(text: str) -> str:
    """Return the trailing path/call expression of `text`, trimmed.

    Scans right to left. Quoted strings are inert. Brackets and parens are
    balanced; an unmatched `(` ends the scan so the argument of a wrapping call is
    returned, e.g. `abs($.foo.` gives `$.foo.`.
    """
    in_single = False
    in_double = False
    bracket_depth = 0
    paren_depth = 0

    for i in range(len(text) - 1, -1, -1):
        ch = text[i]
        if ch == "'" and not in_double and not is_escaped(text, i):
            in_single = not in_single
            continue
        if ch == '"' and not in_single and not is_escaped(text, i):
            in_double = not in_double
            continue
        if in_single or in_double:
            continue

        if ch == "]":
            bracket_depth += 1
            continue
        if ch == "[":
            bracket_depth = max(0, bracket_depth - 1)
            continue
        if ch == ")":
            paren_depth += 1
            continue
        if ch == "(":
            if paren_depth == 0:
                return text[i + 1 :].strip()
            paren_depth -= 1
            continue

        if bracket_depth == 0 and paren_depth == 0 and _is_stop_char(text, i):
            return text[i + 1 :].strip()

    return text.strip()
