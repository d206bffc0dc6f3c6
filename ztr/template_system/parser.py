"""Tokenizer and recursive-descent parser for note templates

Supported syntax is a small Handlebars subset:

    {{name}} {{{name}}} {{this}} {{@index}} {{@first}} {{@last}}
    {{#if name}} {{#unless name}} {{#each name}} {{else}} {{/helper}}
    {{! comment }} {{!-- comment --}}

``{{name}}`` output is HTML-escaped, ``{{{name}}}`` is not. Inside ``each``
the enclosing scope is reachable with ``../`` (``{{../title}}``).

Block, ``else`` and comment tags that sit alone on a line are "standalone":
the whole line, including its newline, is dropped from the output.
"""

import re
from dataclasses import dataclass

from .base import BlockNode, Node, TextNode, VariableNode
from .errors import TemplateSyntaxError

BLOCK_HELPERS = frozenset({"if", "unless", "each"})
DATA_VARIABLES = frozenset({"index", "first", "last"})
MAX_NESTING = 100

_PATH_RE = re.compile(
    r"^(?:\.\./)*(?:\.|[A-Za-z_][\w-]*(?:\.(?:[A-Za-z_][\w-]*|\d+))*)$"
)
_LINE_WHITESPACE = " \t\r"

# Token kinds
TEXT = "text"
VARIABLE = "variable"
COMMENT = "comment"
OPEN = "open"
CLOSE = "close"
ELSE = "else"

_STANDALONE_KINDS = frozenset({COMMENT, OPEN, CLOSE, ELSE})


@dataclass
class Token:
    kind: str
    value: str
    lineno: int
    argument: str = ""
    raw: bool = False


def _is_blank(text: str) -> bool:
    return text.strip(_LINE_WHITESPACE) == ""


class TemplateParser:
    """Compile template source into a tree of nodes"""

    def __init__(self, source: str):
        self.source = source
        self._tokens: list[Token] = []
        self._pos = 0
        self._depth = 0

    def parse(self) -> list[Node]:
        """Parse the whole template, raising ``TemplateSyntaxError`` if malformed"""
        self._tokens = self._strip_standalone(self._tokenize())
        self._pos = 0

        nodes: list[Node] = []
        while self._pos < len(self._tokens):
            token = self._next()
            if token.kind == CLOSE:
                raise TemplateSyntaxError(
                    f"Unexpected closing tag '{{{{/{token.value}}}}}'", token.lineno
                )
            if token.kind == ELSE:
                raise TemplateSyntaxError(
                    "'{{else}}' outside of a block", token.lineno
                )
            node = self._parse_node(token)
            if node is not None:
                nodes.append(node)
        return nodes

    # -- tokenizing ---------------------------------------------------------

    def _lineno(self, offset: int) -> int:
        return self.source.count("\n", 0, offset) + 1

    def _tokenize(self) -> list[Token]:
        source = self.source
        tokens: list[Token] = []
        pos = 0

        while True:
            start = source.find("{{", pos)
            if start == -1:
                if pos < len(source):
                    tokens.append(Token(TEXT, source[pos:], self._lineno(pos)))
                return tokens

            if start > pos:
                tokens.append(Token(TEXT, source[pos:start], self._lineno(pos)))

            lineno = self._lineno(start)
            if source.startswith("{{{", start):
                end = source.find("}}}", start + 3)
                if end == -1:
                    raise TemplateSyntaxError("Unclosed '{{{' tag", lineno)
                inner = source[start + 3 : end]
                tokens.append(self._variable_token(inner, lineno, raw=True))
                pos = end + 3
            elif source.startswith("{{!--", start):
                end = source.find("--}}", start + 5)
                if end == -1:
                    raise TemplateSyntaxError("Unclosed comment", lineno)
                tokens.append(Token(COMMENT, source[start + 5 : end], lineno))
                pos = end + 4
            else:
                end = source.find("}}", start + 2)
                if end == -1:
                    raise TemplateSyntaxError("Unclosed '{{' tag", lineno)
                tokens.append(self._classify(source[start + 2 : end], lineno))
                pos = end + 2

    def _classify(self, inner: str, lineno: int) -> Token:
        expression = inner.strip()
        if not expression:
            raise TemplateSyntaxError("Empty tag", lineno)

        if expression.startswith("!"):
            return Token(COMMENT, expression[1:], lineno)

        if expression.startswith("#"):
            parts = expression[1:].split()
            if not parts:
                raise TemplateSyntaxError("Block tag without a helper name", lineno)
            helper = parts[0]
            if helper not in BLOCK_HELPERS:
                raise TemplateSyntaxError(f"Unknown block helper '{helper}'", lineno)
            if len(parts) != 2:
                raise TemplateSyntaxError(
                    f"'{helper}' block expects exactly one argument", lineno
                )
            self._check_expression(parts[1], lineno)
            return Token(OPEN, helper, lineno, argument=parts[1])

        if expression.startswith("/"):
            name = expression[1:].strip()
            if not name:
                raise TemplateSyntaxError("Closing tag without a helper name", lineno)
            return Token(CLOSE, name, lineno)

        if expression == "else":
            return Token(ELSE, expression, lineno)

        return self._variable_token(inner, lineno)

    def _variable_token(self, inner: str, lineno: int, raw: bool = False) -> Token:
        expression = inner.strip()
        self._check_expression(expression, lineno)
        return Token(VARIABLE, expression, lineno, raw=raw)

    def _check_expression(self, expression: str, lineno: int) -> None:
        if expression.startswith("@"):
            if expression[1:] not in DATA_VARIABLES:
                raise TemplateSyntaxError(
                    f"Unknown data variable '{expression}'", lineno
                )
        else:
            self._check_path(expression, lineno)

    def _check_path(self, path: str, lineno: int) -> None:
        if not _PATH_RE.match(path):
            raise TemplateSyntaxError(f"Invalid expression '{path}'", lineno)

    def _strip_standalone(self, tokens: list[Token]) -> list[Token]:
        """Drop the surrounding line of block tags that stand alone on it"""
        last = len(tokens) - 1
        standalone = [False] * len(tokens)

        for i, token in enumerate(tokens):
            if token.kind not in _STANDALONE_KINDS:
                continue

            if i == 0:
                line_start = True
            else:
                before = tokens[i - 1]
                if before.kind != TEXT:
                    line_start = False
                elif "\n" in before.value:
                    line_start = _is_blank(before.value.rsplit("\n", 1)[1])
                else:
                    line_start = i - 1 == 0 and _is_blank(before.value)

            if not line_start:
                continue

            if i == last:
                line_end = True
            else:
                after = tokens[i + 1]
                if after.kind != TEXT:
                    line_end = False
                elif "\n" in after.value:
                    line_end = _is_blank(after.value.split("\n", 1)[0])
                else:
                    line_end = i + 1 == last and _is_blank(after.value)

            standalone[i] = line_end

        # Flags above come from the untrimmed text; trim only afterwards.
        for i, token in enumerate(tokens):
            if token.kind != TEXT:
                continue
            text = token.value
            start, end = 0, len(text)
            if i > 0 and standalone[i - 1]:
                start = text.index("\n") + 1 if "\n" in text else len(text)
            if i < last and standalone[i + 1]:
                end = text.rindex("\n") + 1 if "\n" in text else 0
            token.value = text[start:end] if start < end else ""

        return [t for t in tokens if not (t.kind == TEXT and not t.value)]

    # -- parsing ------------------------------------------------------------

    def _next(self) -> Token:
        token = self._tokens[self._pos]
        self._pos += 1
        return token

    def _parse_node(self, token: Token) -> Node | None:
        if token.kind == TEXT:
            return TextNode(token.value)
        if token.kind == VARIABLE:
            return VariableNode(token.value, token.lineno, escape=not token.raw)
        if token.kind == OPEN:
            return self._parse_block(token)
        return None

    def _parse_block(self, opening: Token) -> BlockNode:
        if self._depth >= MAX_NESTING:
            raise TemplateSyntaxError(
                f"Blocks nested deeper than {MAX_NESTING} levels", opening.lineno
            )
        self._depth += 1
        try:
            return self._parse_block_body(opening)
        finally:
            self._depth -= 1

    def _parse_block_body(self, opening: Token) -> BlockNode:
        body: list[Node] = []
        inverse: list[Node] | None = None
        current = body

        while self._pos < len(self._tokens):
            token = self._next()
            if token.kind == CLOSE:
                if token.value != opening.value:
                    raise TemplateSyntaxError(
                        f"'{{{{/{token.value}}}}}' does not match "
                        f"'{{{{#{opening.value}}}}}' opened on line {opening.lineno}",
                        token.lineno,
                    )
                return BlockNode(
                    helper=opening.value,
                    argument=opening.argument,
                    body=tuple(body),
                    inverse=tuple(inverse or ()),
                    lineno=opening.lineno,
                )
            if token.kind == ELSE:
                if inverse is not None:
                    raise TemplateSyntaxError(
                        f"Duplicate '{{{{else}}}}' in '{{{{#{opening.value}}}}}'",
                        token.lineno,
                    )
                inverse = []
                current = inverse
                continue
            node = self._parse_node(token)
            if node is not None:
                current.append(node)

        raise TemplateSyntaxError(
            f"Unclosed block '{{{{#{opening.value}}}}}'", opening.lineno
        )


def parse_template(source: str) -> list[Node]:
    """Compile ``source`` into nodes"""
    return TemplateParser(source).parse()
