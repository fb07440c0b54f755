"""Static tag policy table.

Maps every lower-cased source element name to one of the nine output tags
of the legacy dialect, or to one of two sentinel policies:

- DROP_WRAPPER: the element's own tag disappears, its processed children are
  spliced into the parent
- DISCARD_SUBTREE: the element and everything inside it is removed

The lookup is total: any name not listed is DROP_WRAPPER.
"""

from enum import Enum
from types import MappingProxyType
from typing import FrozenSet, Mapping


class TagPolicy(Enum):
    """Output primitive (or sentinel policy) for a source element."""
    B = "b"
    I = "i"  # noqa: E741
    U = "u"
    SUB = "sub"
    SUP = "sup"
    BR = "br"
    P = "p"
    UL = "ul"
    OL = "ol"
    LI = "li"
    DROP_WRAPPER = "drop-wrapper"
    DISCARD_SUBTREE = "discard-subtree"

    @property
    def tag(self) -> str:
        """Output tag name. Only meaningful for the nine real tags."""
        return self.value


# Tags of the legacy dialect
ALLOWED_TAGS: FrozenSet[str] = frozenset(
    {'b', 'i', 'u', 'sub', 'sup', 'p', 'br', 'ul', 'ol', 'li'}
)

# Inline formatting tags, used by the post-processor for empty-element removal
FORMATTING_TAGS: FrozenSet[str] = frozenset({'b', 'i', 'u', 'sub', 'sup'})

# Non-content elements: scripts, styles, media embeds, form controls, metadata
DISCARDED_TAGS: FrozenSet[str] = frozenset({
    'script', 'style', 'svg', 'math', 'xml', 'head', 'title', 'meta', 'link',
    'base', 'object', 'embed', 'applet', 'iframe', 'frame', 'frameset',
    'template', 'noscript', 'canvas', 'audio', 'video', 'source', 'track',
    'picture', 'img', 'map', 'button', 'input', 'select', 'option',
    'optgroup', 'datalist', 'textarea',
})

# Structural divisions; their presence anywhere disables plain-text mode
BLOCK_TAGS: FrozenSet[str] = frozenset({
    'div', 'p', 'h1', 'h2', 'h3', 'h4', 'h5', 'h6', 'article', 'section',
    'main', 'nav', 'aside', 'header', 'footer', 'blockquote', 'pre',
    'address', 'center', 'figure', 'li', 'tr', 'ul', 'ol', 'dl', 'table',
})

HEADING_TAGS: FrozenSet[str] = frozenset({'h1', 'h2', 'h3', 'h4', 'h5', 'h6'})

TABLE_HEADER_TAGS: FrozenSet[str] = frozenset({'th'})

TABLE_ROW_TAGS: FrozenSet[str] = frozenset({'tr'})

TABLE_CELL_TAGS: FrozenSet[str] = frozenset({'td', 'th'})

LIST_TAGS: FrozenSet[str] = frozenset({'ul', 'ol'})

# Containers whose whitespace-only text children are layout noise
STRUCTURAL_CONTAINER_TAGS: FrozenSet[str] = frozenset({
    'ul', 'ol', 'dl', 'table', 'thead', 'tbody', 'tfoot', 'tr',
})

_BASE_POLICY = {
    # Bold family (headings are p + forced bold, see HEADING_TAGS)
    'b': TagPolicy.B,
    'strong': TagPolicy.B,
    'th': TagPolicy.B,
    'dt': TagPolicy.B,
    # Italic family
    'i': TagPolicy.I,
    'em': TagPolicy.I,
    'cite': TagPolicy.I,
    'var': TagPolicy.I,
    'dfn': TagPolicy.I,
    # Underline family
    'u': TagPolicy.U,
    'ins': TagPolicy.U,
    'sub': TagPolicy.SUB,
    'sup': TagPolicy.SUP,
    # Breaks; rows and definitions degrade to a break before their content
    'br': TagPolicy.BR,
    'hr': TagPolicy.BR,
    'tr': TagPolicy.BR,
    'dd': TagPolicy.BR,
    # Paragraph-like blocks
    'p': TagPolicy.P,
    'div': TagPolicy.P,
    'blockquote': TagPolicy.P,
    'pre': TagPolicy.P,
    'address': TagPolicy.P,
    'center': TagPolicy.P,
    'h1': TagPolicy.P,
    'h2': TagPolicy.P,
    'h3': TagPolicy.P,
    'h4': TagPolicy.P,
    'h5': TagPolicy.P,
    'h6': TagPolicy.P,
    'article': TagPolicy.P,
    'section': TagPolicy.P,
    'main': TagPolicy.P,
    'nav': TagPolicy.P,
    'aside': TagPolicy.P,
    'header': TagPolicy.P,
    'footer': TagPolicy.P,
    'dl': TagPolicy.P,
    'table': TagPolicy.P,
    # Lists
    'ul': TagPolicy.UL,
    'ol': TagPolicy.OL,
    'li': TagPolicy.LI,
}
_BASE_POLICY.update({name: TagPolicy.DISCARD_SUBTREE for name in DISCARDED_TAGS})

TAG_POLICY: Mapping[str, TagPolicy] = MappingProxyType(_BASE_POLICY)


def policy_for(tag_name: str, convert_divs_to_paragraphs: bool = True) -> TagPolicy:
    """Look up the policy for a source element name.

    Args:
        tag_name: Element name (any case)
        convert_divs_to_paragraphs: When False, <div> maps to a break

    Returns:
        The element's TagPolicy (DROP_WRAPPER for unknown names)
    """
    name = tag_name.lower()
    if name == 'div' and not convert_divs_to_paragraphs:
        return TagPolicy.BR
    return TAG_POLICY.get(name, TagPolicy.DROP_WRAPPER)


def forces_bold(tag_name: str) -> bool:
    """True for headings and table headers, which always render bold."""
    name = tag_name.lower()
    return name in HEADING_TAGS or name in TABLE_HEADER_TAGS
