"""Template system for note files"""

from .base import BlockNode, ITemplateRenderer, Node, TextNode, VariableNode
from .errors import TemplateError, TemplateSyntaxError
from .parser import TemplateParser, parse_template
from .processor import (
    TemplateRenderer,
    escape_html,
    format_value,
    is_truthy,
    render_note,
)

__all__ = [
    "BlockNode",
    "ITemplateRenderer",
    "Node",
    "TextNode",
    "VariableNode",
    "TemplateError",
    "TemplateSyntaxError",
    "TemplateParser",
    "parse_template",
    "TemplateRenderer",
    "escape_html",
    "format_value",
    "is_truthy",
    "render_note",
]
