"""Tree rewriter: the core of the normalization engine.

Walks a parsed BeautifulSoup tree depth-first and post-order (children are
rewritten before their parent decides its own wrapping) and builds a fresh
output fragment that uses only the legacy dialect. The input tree is never
modified.

Per element, in order:

1. DISCARD_SUBTREE elements produce nothing and are counted.
2. The style attribute is classified (and counted as removed).
3. Children are rewritten with a descended RewriteContext.
4. An element with no surviving content produces nothing, except breaks.
5. Inside a list item, paragraph wrappers are suppressed.
6. Inline wrappers are applied innermost to outermost: sub, sup, u, i, b.
7. Block wrappers (p, ul, ol, li) wrap everything; break-mapped elements
   emit one <br> before their own content.
"""

import logging
import re
from typing import List, Optional

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import PreformattedString

from legacy_cleaner.models import ConversionConfig

from .errors import NestingDepthError
from .nodes import Fragment, OutputElement, OutputText, RewriteContext, wrap
from .style_classifier import classify_style
from .tag_policy import (
    LIST_TAGS,
    TABLE_CELL_TAGS,
    TABLE_ROW_TAGS,
    TagPolicy,
    forces_bold,
    policy_for,
)

logger = logging.getLogger(__name__)

_LINE_TERMINATORS = re.compile(r"[\r\n]+")
_CRLF = re.compile(r"\r\n?")
_WHITESPACE_RUN = re.compile(r"\s+")
_HORIZONTAL_WHITESPACE_RUN = re.compile(r"[^\S\n]+")

_BLOCK_WRAPPERS = (TagPolicy.UL, TagPolicy.OL, TagPolicy.LI)

# Output elements that may not sit inside a paragraph
_PARAGRAPH_BREAKERS = frozenset({'p', 'ul', 'ol'})

UNORDERED_PREFIX = "• "


class TreeRewriter:
    """Rewrites one parsed document into a legacy-dialect fragment.

    A rewriter is created per conversion call; its counters describe that
    call only.

    Attributes:
        config: Conversion settings
        plain_text: Preserve raw line breaks (input has no block structure)
        tags_removed: Elements discarded with their subtree
        attributes_removed: Non-empty style attributes stripped

    Example:
        >>> rewriter = TreeRewriter(ConversionConfig())
        >>> fragment = rewriter.rewrite(parse_markup("<strong>Hi</strong>"))
        >>> serialize(fragment)
        '<b>Hi</b>'
    """

    def __init__(self, config: ConversionConfig, plain_text: bool = False):
        self.config = config
        self.plain_text = plain_text
        self.tags_removed = 0
        self.attributes_removed = 0

    def rewrite(self, soup: BeautifulSoup) -> Fragment:
        """Rewrite the whole document.

        Args:
            soup: Parsed (and sanitized) input tree

        Returns:
            Output fragment in document order

        Raises:
            NestingDepthError: If nesting exceeds config.max_depth
        """
        result: Fragment = []
        context = RewriteContext()
        for child in soup.children:
            result.extend(self._rewrite_node(child, context))
        logger.debug(
            f"Rewrote document: {len(result)} top-level node(s), "
            f"{self.tags_removed} tag(s) removed, "
            f"{self.attributes_removed} attribute(s) removed"
        )
        return result

    def _rewrite_node(self, node, context: RewriteContext) -> Fragment:
        if isinstance(node, Tag):
            return self._rewrite_element(node, context)
        if isinstance(node, NavigableString) and not isinstance(node, PreformattedString):
            return self._rewrite_text(str(node), context)
        # Comments, doctypes, CDATA and processing instructions
        return []

    def _rewrite_text(self, text: str, context: RewriteContext) -> Fragment:
        if self.plain_text:
            text = _CRLF.sub('\n', text)
            if self.config.aggressive_whitespace:
                text = _HORIZONTAL_WHITESPACE_RUN.sub(' ', text)
        else:
            text = _LINE_TERMINATORS.sub(' ', text)
            if self.config.aggressive_whitespace:
                text = _WHITESPACE_RUN.sub(' ', text)

        if not text:
            return []
        if context.in_structural_container and not text.strip():
            return []
        return [OutputText(text)]

    def _rewrite_element(self, element: Tag, context: RewriteContext) -> Fragment:
        name = element.name.lower()
        policy = policy_for(name, self.config.convert_divs_to_paragraphs)

        if policy is TagPolicy.DISCARD_SUBTREE:
            self.tags_removed += 1
            return []

        if context.depth >= self.config.max_depth:
            raise NestingDepthError(self.config.max_depth)

        style = element.get('style') or ''
        if isinstance(style, list):
            style = ' '.join(style)
        if style.strip():
            self.attributes_removed += 1
        flags = classify_style(style)

        content = self._rewrite_children(element, name, context.descend(name))

        if not content and policy is not TagPolicy.BR:
            return []

        if self.config.flatten_lists:
            policy, content = self._flatten_list_element(policy, content, context)

        # Legacy systems do not tolerate block elements inside list items
        if policy is TagPolicy.P and context.inside_list_item:
            policy = TagPolicy.DROP_WRAPPER

        result = content
        if result:
            if policy is TagPolicy.SUB:
                result = wrap(result, 'sub')
            if policy is TagPolicy.SUP:
                result = wrap(result, 'sup')
            if policy is TagPolicy.U or flags.underline:
                result = wrap(result, 'u')
            if policy is TagPolicy.I or flags.italic:
                result = wrap(result, 'i')
            if policy is TagPolicy.B or flags.bold or forces_bold(name):
                result = wrap(result, 'b')

        if policy is TagPolicy.P:
            return _wrap_paragraphs(result)
        if policy in _BLOCK_WRAPPERS:
            return wrap(result, policy.tag)
        if policy is TagPolicy.BR:
            return [OutputElement('br')] + result
        return result

    def _rewrite_children(self, element: Tag, name: str, child_context: RewriteContext) -> Fragment:
        result: Fragment = []
        is_list = name in LIST_TAGS
        is_row = name in TABLE_ROW_TAGS
        item_index = _list_start(element) - 1 if name == 'ol' else 0
        cell_emitted = False

        for child in element.children:
            context = child_context
            is_tag = isinstance(child, Tag)
            if is_list and is_tag and child.name.lower() == 'li':
                item_index += 1
                context = child_context.for_item(item_index)

            processed = self._rewrite_node(child, context)
            if not processed:
                continue

            # Cells in a row are joined by a single space
            if is_row and is_tag and child.name.lower() in TABLE_CELL_TAGS:
                if cell_emitted:
                    result.append(OutputText(' '))
                cell_emitted = True
            result.extend(processed)

        return result

    def _flatten_list_element(self, policy: TagPolicy, content: Fragment, context: RewriteContext):
        """Replace native list markup with synthesized prefixes and breaks."""
        if policy in (TagPolicy.UL, TagPolicy.OL):
            return TagPolicy.BR, content
        if policy is TagPolicy.LI:
            if context.list_kind == 'ol':
                prefix = f"{context.item_index}. "
            else:
                prefix = UNORDERED_PREFIX
            flattened: List = [OutputText(prefix)] + content + [OutputElement('br')]
            return TagPolicy.DROP_WRAPPER, flattened
        return policy, content


def _list_start(element: Tag) -> int:
    """First item number of an ordered list, honoring ``start``."""
    start: Optional[str] = element.get('start')
    if isinstance(start, str) and start.strip().lstrip('-').isdigit():
        return int(start.strip())
    return 1


def _wrap_paragraphs(content: Fragment) -> Fragment:
    """Wrap content in <p>, splitting around nested blocks.

    Runs of inline content become paragraphs of their own and nested
    p/ul/ol elements are lifted out as siblings, so ``<div>x<div>y</div></div>``
    yields ``<p>x</p><p>y</p>`` rather than nested paragraphs. Runs made only
    of whitespace are dropped.
    """
    result: Fragment = []
    run: Fragment = []

    def flush():
        if any(not isinstance(node, OutputText) or node.text.strip() for node in run):
            result.extend(wrap(run, 'p'))
        run.clear()

    for node in content:
        if isinstance(node, OutputElement) and node.tag in _PARAGRAPH_BREAKERS:
            flush()
            result.append(node)
        else:
            run.append(node)
    flush()
    return result
