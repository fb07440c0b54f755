"""Unit tests for normalizer.sanitizer module."""

import pytest

from legacy_cleaner.normalizer.sanitizer import sanitize, sanitize_for_preview


class TestSanitize:
    """Test cases for sanitize."""

    def test_removes_script_with_content(self):
        """Script elements disappear together with their code."""
        report = sanitize("<p>ok</p><script>alert(1)</script>")
        assert "script" not in report.html
        assert "alert" not in report.html
        assert report.tags_removed == 1

    @pytest.mark.parametrize("tag", ["style", "iframe", "noscript", "template", "object"])
    def test_removes_forbidden_elements(self, tag):
        """Every forbidden element is removed with its subtree."""
        report = sanitize(f"before<{tag}>hidden</{tag}>after")
        assert "hidden" not in report.html
        assert report.tags_removed == 1

    def test_nested_forbidden_elements_counted_once(self):
        """A forbidden element inside another is removed with its ancestor."""
        report = sanitize("<noscript><script>x()</script></noscript>text")
        assert report.tags_removed == 1
        assert report.html == "text"

    def test_strips_comments(self):
        """HTML comments are dropped."""
        report = sanitize("<!--StartFragment--><b>x</b><!--EndFragment-->")
        assert report.html == "<b>x</b>"

    def test_strips_doctype(self):
        """Doctype declarations are dropped."""
        report = sanitize("<!DOCTYPE html><p>x</p>")
        assert "DOCTYPE" not in report.html

    def test_strips_event_handlers(self):
        """on* attributes are removed and counted."""
        report = sanitize('<p onclick="steal()" onMouseOver="x()" class="keep">x</p>')
        assert "onclick" not in report.html.lower()
        assert "onmouseover" not in report.html.lower()
        assert 'class="keep"' in report.html
        assert report.attributes_removed == 2

    def test_strips_script_urls(self):
        """javascript: and vbscript: URLs are removed; ordinary links stay."""
        report = sanitize(
            '<a href=" JavaScript:alert(1)">a</a>'
            '<a href="vbscript:msgbox">b</a>'
            '<a href="https://example.com">c</a>'
        )
        assert "alert" not in report.html
        assert "vbscript" not in report.html
        assert 'href="https://example.com"' in report.html
        assert report.attributes_removed == 2

    def test_keeps_text_and_entities(self):
        """Escaped characters survive re-serialization."""
        report = sanitize("<p>Fish &amp; chips &lt;today&gt;</p>")
        assert report.html == "<p>Fish &amp; chips &lt;today&gt;</p>"

    def test_clean_input_reports_nothing(self):
        """Nothing removed means zero counters."""
        report = sanitize("<b>fine</b>")
        assert report.tags_removed == 0
        assert report.attributes_removed == 0


class TestSanitizeForPreview:
    """Test cases for sanitize_for_preview."""

    def test_keeps_allowlisted_tags_without_attributes(self):
        """Allowed tags survive with every attribute cleared."""
        html = sanitize_for_preview('<p class="x"><strong title="t">Hi</strong></p>')
        assert html == "<p><strong>Hi</strong></p>"

    def test_unwraps_other_elements(self):
        """Elements outside the allowlist are unwrapped, text kept."""
        html = sanitize_for_preview('<div><a href="https://example.com">link</a> text</div>')
        assert html == "link text"

    def test_removes_scripts(self):
        """Forbidden elements are removed, not unwrapped."""
        html = sanitize_for_preview("<b>x</b><script>alert(1)</script>")
        assert html == "<b>x</b>"

    def test_engine_output_passes_unchanged(self):
        """Legacy dialect output is already preview safe."""
        html = sanitize_for_preview("<p>a<br/>b</p><ul><li><i>c</i></li></ul>")
        assert html == "<p>a<br/>b</p><ul><li><i>c</i></li></ul>"
