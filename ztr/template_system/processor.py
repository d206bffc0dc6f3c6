"""Core template renderer"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from ztr.notes.models import ResolvedNote
from ztr.utils.logger import get_logger

from .base import BlockNode, ITemplateRenderer, Node, TextNode, VariableNode
from .parser import parse_template

logger = get_logger(__name__)

_MISSING = object()
_PARENT_PREFIX = "../"

_HTML_ESCAPES = str.maketrans(
    {
        "&": "&amp;",
        "<": "&lt;",
        ">": "&gt;",
        '"': "&quot;",
        "'": "&#x27;",
        "`": "&#x60;",
        "=": "&#x3D;",
    }
)


@dataclass
class _Scope:
    """Current ``this`` plus ``@`` data for one level of nesting"""

    this: Any
    data: dict[str, Any] = field(default_factory=dict)
    parent: "_Scope | None" = None


def is_truthy(value: Any) -> bool:
    """Handlebars truthiness: empty strings and empty sequences are falsy"""
    if value is None or value is False:
        return False
    if isinstance(value, str | Sequence | Mapping):
        return len(value) > 0
    if isinstance(value, int | float):
        return value != 0
    return True


def format_value(value: Any) -> str:
    """Format a bound value for output.

    Sequences render as ``[a, b]`` and mappings as ``[object]``, the way
    Handlebars prints non-scalar JSON values.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return value
    if isinstance(value, Mapping):
        return "[object]"
    if isinstance(value, Sequence):
        return "[" + ", ".join(format_value(item) for item in value) + "]"
    return str(value)


def escape_html(text: str) -> str:
    """Escape ``& < > " ' ` =`` as HTML entities"""
    return text.translate(_HTML_ESCAPES)


class TemplateRenderer:
    """Render templates for interpolation, conditionals and iteration"""

    def render(self, template: str, context: Mapping[str, Any]) -> str:
        """Compile ``template`` and render it against ``context``.

        The template is compiled on every call. Malformed templates raise
        ``TemplateSyntaxError``.
        """
        nodes = parse_template(template)
        output: list[str] = []
        self._render_nodes(nodes, _Scope(this=context), output)
        rendered = "".join(output)
        logger.debug("Template rendered", nodes=len(nodes), size=len(rendered))
        return rendered

    def _render_nodes(
        self, nodes: Sequence[Node], scope: _Scope, output: list[str]
    ) -> None:
        for node in nodes:
            if isinstance(node, TextNode):
                output.append(node.text)
            elif isinstance(node, VariableNode):
                text = format_value(self._lookup(node.path, scope))
                output.append(escape_html(text) if node.escape else text)
            elif isinstance(node, BlockNode):
                self._render_block(node, scope, output)

    def _render_block(self, node: BlockNode, scope: _Scope, output: list[str]) -> None:
        value = self._lookup(node.argument, scope)

        if node.helper == "if":
            branch = node.body if is_truthy(value) else node.inverse
            self._render_nodes(branch, scope, output)
        elif node.helper == "unless":
            branch = node.inverse if is_truthy(value) else node.body
            self._render_nodes(branch, scope, output)
        elif node.helper == "each":
            self._render_each(node, value, scope, output)

    def _render_each(
        self, node: BlockNode, value: Any, scope: _Scope, output: list[str]
    ) -> None:
        if isinstance(value, str) or not isinstance(value, Sequence) or not value:
            self._render_nodes(node.inverse, scope, output)
            return

        last = len(value) - 1
        for index, item in enumerate(value):
            item_scope = _Scope(
                this=item,
                data={"index": index, "first": index == 0, "last": index == last},
                parent=scope,
            )
            self._render_nodes(node.body, item_scope, output)

    def _lookup(self, path: str, scope: _Scope) -> Any:
        while path.startswith(_PARENT_PREFIX):
            path = path[len(_PARENT_PREFIX) :]
            if scope.parent is None:
                return None
            scope = scope.parent

        if path.startswith("@"):
            return scope.data.get(path[1:])
        if path in (".", "this"):
            return scope.this

        segments = path.split(".")
        if segments[0] == "this":
            segments = segments[1:]

        current = scope.this
        for segment in segments:
            current = self._get(current, segment)
            if current is _MISSING:
                return None
        return current

    @staticmethod
    def _get(container: Any, key: str) -> Any:
        if isinstance(container, Mapping):
            return container.get(key, _MISSING)
        if (
            isinstance(container, Sequence)
            and not isinstance(container, str)
            and key.isdigit()
        ):
            index = int(key)
            return container[index] if index < len(container) else _MISSING
        return _MISSING


def render_note(
    note: ResolvedNote, renderer: ITemplateRenderer | None = None
) -> str:
    """Render ``note.template`` against the note's own fields"""
    renderer = renderer or TemplateRenderer()
    return renderer.render(note.template, note.to_context())
