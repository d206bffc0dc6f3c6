"""Template system base classes and protocols"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Protocol, Union


@dataclass(frozen=True)
class TextNode:
    """Literal text copied to the output as-is"""

    text: str


@dataclass(frozen=True)
class VariableNode:
    """``{{path}}`` or ``{{@data}}`` interpolation, HTML-escaped unless ``{{{ }}}``"""

    path: str
    lineno: int
    escape: bool = True


@dataclass(frozen=True)
class BlockNode:
    """``{{#helper argument}}body{{else}}inverse{{/helper}}``"""

    helper: str
    argument: str
    body: tuple["Node", ...]
    inverse: tuple["Node", ...]
    lineno: int


Node = Union[TextNode, VariableNode, BlockNode]


class ITemplateRenderer(Protocol):
    """Template renderer interface for dependency inversion."""

    def render(self, template: str, context: Mapping[str, Any]) -> str:
        """Render template source against the given bindings."""
        ...
