"""System instruction for the generative cleanup path.

The model is asked, in natural language, to honor the same nine-tag
vocabulary and paragraph mode as the rule-based engine. Nothing verifies
that it does.
"""

from legacy_cleaner.models import ConversionConfig

_PROMPT_TEMPLATE = """\
You are a strictly compliant Legacy HTML Converter.
Your goal is to take input text (which might be messy HTML, RTF content, or plain text) and convert it into a specific subset of HTML tags.

RULES:
1. ALLOWED TAGS ONLY: <b>, <i>, <u>, <sub>, <sup>, <p>, <br>, <ul>, <ol>, <li>.
2. STRICTLY FORBIDDEN: <div>, <span>, <style>, classes, ids, or inline styles.
3. MAPPING:
   - Bold/Strong -> <b>
   - Italic/Em -> <i>
   - Underline/Ins -> <u>
   - {paragraph_rule}
4. Clean up whitespace. Do not leave empty tags like <b></b>.
5. Return ONLY the HTML snippet. Do not wrap in markdown code blocks. Do not add <html> or <body> tags.
"""


def paragraph_rule(config: ConversionConfig) -> str:
    if config.uses_paragraphs:
        return "Paragraphs -> <p>"
    return "Paragraphs -> <br><br> (Do NOT use <p> tags)"


def build_system_prompt(config: ConversionConfig) -> str:
    """Build the system instruction for the given configuration."""
    return _PROMPT_TEMPLATE.format(paragraph_rule=paragraph_rule(config))
