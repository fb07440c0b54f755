"""Output tree and rewrite context for the tree rewriter.

The rewriter never mutates the parsed input tree; it builds fresh
OutputText/OutputElement nodes and serializes them once at the end.
"""

from dataclasses import dataclass, replace
from html import escape
from typing import List, Optional, Sequence, Tuple, Union

from .tag_policy import ALLOWED_TAGS, LIST_TAGS, STRUCTURAL_CONTAINER_TAGS


@dataclass(frozen=True)
class OutputText:
    """Text node of the output tree. Holds unescaped characters."""
    text: str


@dataclass(frozen=True)
class OutputElement:
    """Element node of the output tree.

    Only tags of the legacy dialect are accepted and elements never carry
    attributes.
    """
    tag: str
    children: Tuple['OutputNode', ...] = ()

    def __post_init__(self):
        if self.tag not in ALLOWED_TAGS:
            raise ValueError(f"Tag '{self.tag}' is not part of the legacy dialect")


OutputNode = Union[OutputText, OutputElement]
Fragment = List[OutputNode]


def wrap(fragment: Sequence[OutputNode], tag: str) -> Fragment:
    """Wrap a fragment in a single element, returning a one-node fragment."""
    return [OutputElement(tag, tuple(fragment))]


def escape_text(text: str) -> str:
    """Escape text for HTML output; non-breaking spaces become &nbsp;."""
    return escape(text, quote=False).replace('\xa0', '&nbsp;')


def serialize(fragment: Sequence[OutputNode]) -> str:
    """Serialize an output fragment to an HTML string.

    Break elements are written as ``<br>``; every other element as an
    open/close pair with no attributes.
    """
    parts: List[str] = []
    _serialize_into(fragment, parts)
    return ''.join(parts)


def _serialize_into(fragment: Sequence[OutputNode], parts: List[str]) -> None:
    for node in fragment:
        if isinstance(node, OutputText):
            parts.append(escape_text(node.text))
        elif node.tag == 'br':
            parts.append('<br>')
        else:
            parts.append(f'<{node.tag}>')
            _serialize_into(node.children, parts)
            parts.append(f'</{node.tag}>')


@dataclass(frozen=True)
class RewriteContext:
    """Descending context threaded through the rewrite recursion.

    Passed by value: each element builds its children's context with
    ``descend`` and siblings never observe each other's changes.

    Attributes:
        inside_list_item: Somewhere below an <li>; paragraph wrappers are
            suppressed
        list_kind: 'ul' or 'ol' of the nearest enclosing list, if any
        item_index: Running number of the current list item (ordered lists
            honor the ``start`` offset)
        parent_tag: Lower-cased name of the parent source element
        depth: Nesting depth, checked against the recursion guard
    """
    inside_list_item: bool = False
    list_kind: Optional[str] = None
    item_index: int = 0
    parent_tag: str = ''
    depth: int = 0

    def descend(self, tag_name: str) -> 'RewriteContext':
        """Context for the children of an element named ``tag_name``."""
        return replace(
            self,
            inside_list_item=self.inside_list_item or tag_name == 'li',
            list_kind=tag_name if tag_name in LIST_TAGS else self.list_kind,
            parent_tag=tag_name,
            depth=self.depth + 1,
        )

    def for_item(self, index: int) -> 'RewriteContext':
        """Context for a list item child carrying its running index."""
        return replace(self, item_index=index)

    @property
    def in_structural_container(self) -> bool:
        """Directly inside a list or table container, where bare whitespace
        between items is layout noise."""
        return self.parent_tag in STRUCTURAL_CONTAINER_TAGS
