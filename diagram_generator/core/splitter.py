"""
Statement splitting and bracket scanning helpers
"""
from typing import List, Tuple

from .patterns import BLOCK_COMMENT, JAVA_COMMENT_OR_LITERAL, LINE_COMMENT


def split_sql_statements(sql: str) -> List[str]:
    """
    Split a script into statements on every `;`.

    The split is deliberately naive: a `;` inside a string literal or a
    comment still ends the statement. Blank fragments are dropped and each
    kept fragment gets its terminating `;` back.
    """
    statements = []
    for fragment in sql.split(';'):
        if not fragment.strip():
            continue
        statements.append(fragment.strip() + ';')
    return statements


def strip_sql_comments(statement: str) -> str:
    """Remove `--` and `/* */` comments from a single statement"""
    statement = BLOCK_COMMENT.sub(' ', statement)
    return LINE_COMMENT.sub('', statement)


def find_matching_bracket(text: str, open_pos: int, open_char: str = '(',
                          close_char: str = ')') -> int:
    """
    Return the index of the bracket closing the one at open_pos, or -1 when
    the text ends first. Brackets inside quotes are ignored.
    """
    depth = 0
    in_quote = False
    quote_char = None

    i = open_pos
    while i < len(text):
        char = text[i]

        if char in ("'", '"', '`') and (i == 0 or text[i - 1] != '\\'):
            if not in_quote:
                in_quote = True
                quote_char = char
            elif char == quote_char:
                in_quote = False
                quote_char = None

        if not in_quote:
            if char == open_char:
                depth += 1
            elif char == close_char:
                depth -= 1
                if depth == 0:
                    return i

        i += 1

    return -1


def smart_split(content: str) -> List[str]:
    """Split on top-level commas, honoring nested parentheses and quotes"""
    parts = []
    current = ''
    depth = 0
    in_quote = False
    quote_char = None

    i = 0
    while i < len(content):
        char = content[i]

        if char in ("'", '"') and (i == 0 or content[i - 1] != '\\'):
            if not in_quote:
                in_quote = True
                quote_char = char
            elif char == quote_char:
                in_quote = False
                quote_char = None

        if not in_quote:
            if char == '(':
                depth += 1
            elif char == ')':
                depth -= 1
            elif char == ',' and depth == 0:
                parts.append(current.strip())
                current = ''
                i += 1
                continue

        current += char
        i += 1

    if current.strip():
        parts.append(current.strip())

    return parts


def blank_comments_and_literals(source: str) -> str:
    """
    Replace Java comments and the contents of string, char and text block
    literals with spaces so braces and keywords inside them are not seen as
    structure. Offsets and line breaks are preserved.
    """
    def _spaces(text):
        return ''.join('\n' if c == '\n' else ' ' for c in text)

    def _blank(match):
        token = match.group(0)
        if token.startswith('/'):
            return _spaces(token)
        return token[0] + _spaces(token[1:-1]) + token[-1]

    return JAVA_COMMENT_OR_LITERAL.sub(_blank, source)


def split_member_declarations(body: str) -> List[Tuple[str, str]]:
    """
    Cut a class body into its top-level member declarations.

    Each declaration ends at a `;` or at the `{` opening a nested block
    (method body, initializer, nested type); the nested block itself is
    skipped. Returns (declaration text, terminator) pairs.
    """
    declarations = []
    current = ''
    i = 0
    while i < len(body):
        char = body[i]
        if char == ';':
            declarations.append((current.strip(), ';'))
            current = ''
        elif char == '{':
            close = find_matching_bracket(body, i, '{', '}')
            if '=' in current:
                # array initializer or anonymous class; the field ends at `;`
                current += ' {} '
            else:
                declarations.append((current.strip(), '{'))
                current = ''
            if close == -1:
                break
            i = close
        elif char == '}':
            # stray close brace, e.g. from an unbalanced body
            current = ''
        else:
            current += char
        i += 1

    return [(text, end) for text, end in declarations if text]
