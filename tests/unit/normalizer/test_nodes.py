"""Unit tests for normalizer.nodes module."""

import pytest

from legacy_cleaner.normalizer.nodes import (
    OutputElement,
    OutputText,
    RewriteContext,
    escape_text,
    serialize,
    wrap,
)


class TestOutputElement:
    """Test cases for OutputElement."""

    def test_rejects_tags_outside_dialect(self):
        """Only legacy dialect tags can be constructed."""
        with pytest.raises(ValueError, match="span"):
            OutputElement('span')

    def test_wrap_returns_single_node_fragment(self):
        """wrap produces a one-element fragment holding the original nodes."""
        fragment = wrap([OutputText('a'), OutputText('b')], 'b')
        assert fragment == [OutputElement('b', (OutputText('a'), OutputText('b')))]


class TestSerialize:
    """Test cases for serialize."""

    def test_nested_elements(self):
        """Elements serialize as attribute-free open/close pairs."""
        fragment = [
            OutputElement('p', (
                OutputElement('b', (OutputText('Hello '), OutputElement('i', (OutputText('world'),)))),
            )),
        ]
        assert serialize(fragment) == '<p><b>Hello <i>world</i></b></p>'

    def test_break_is_void(self):
        """Breaks serialize as a single <br>."""
        assert serialize([OutputText('a'), OutputElement('br'), OutputText('b')]) == 'a<br>b'

    def test_text_is_escaped(self):
        """Markup characters in text are escaped."""
        assert serialize([OutputText('a < b & c > d')]) == 'a &lt; b &amp; c &gt; d'

    def test_quotes_are_not_escaped(self):
        """Quotes only matter inside attributes, which never occur."""
        assert escape_text('"quoted" \'text\'') == '"quoted" \'text\''

    def test_non_breaking_space_written_as_entity(self):
        """U+00A0 is written as &nbsp;."""
        assert escape_text('a\xa0b') == 'a&nbsp;b'


class TestRewriteContext:
    """Test cases for RewriteContext."""

    def test_defaults(self):
        """A fresh context is at the document root."""
        context = RewriteContext()
        assert context.inside_list_item is False
        assert context.list_kind is None
        assert context.depth == 0

    def test_descend_increments_depth(self):
        """Each descent is one level deeper."""
        context = RewriteContext().descend('div').descend('span')
        assert context.depth == 2
        assert context.parent_tag == 'span'

    def test_list_item_flag_is_sticky(self):
        """Once inside a list item, every descendant is too."""
        context = RewriteContext().descend('ul').descend('li').descend('p').descend('span')
        assert context.inside_list_item is True
        assert context.list_kind == 'ul'

    def test_nearest_list_kind_wins(self):
        """A nested list overrides the enclosing list kind."""
        context = RewriteContext().descend('ul').descend('li').descend('ol')
        assert context.list_kind == 'ol'

    def test_siblings_do_not_share_changes(self):
        """descend returns a new value and leaves the original untouched."""
        parent = RewriteContext()
        parent.descend('li')
        assert parent.inside_list_item is False
        assert parent.depth == 0

    def test_for_item_sets_index(self):
        """for_item only changes the running index."""
        context = RewriteContext().descend('ol').for_item(4)
        assert context.item_index == 4
        assert context.list_kind == 'ol'

    def test_structural_container(self):
        """Lists and tables are structural containers; paragraphs are not."""
        assert RewriteContext().descend('ul').in_structural_container is True
        assert RewriteContext().descend('tr').in_structural_container is True
        assert RewriteContext().descend('p').in_structural_container is False
