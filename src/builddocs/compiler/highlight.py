"""Server-side syntax highlighting for compiled code blocks.

Uses Pygments to tokenize the contents of every ``<pre><code>`` block in a
rendered fragment. Blocks keep their ``language-*`` class so client-side
stylesheets can target them.
"""

from __future__ import annotations

import logging
from typing import Dict, Mapping

from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexer import Lexer
from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound

from builddocs.config import DEFAULT_CODE_LANGUAGE
from builddocs.utils.text import class_names, parse_html

LOGGER = logging.getLogger(__name__)

LANGUAGE_PREFIX = "language-"

_FORMATTER = HtmlFormatter(nowrap=True)


def _lexer_for(language: str, code: str) -> Lexer | None:
    # PHP snippets usually omit the opening tag; full files start with it
    options = {"startinline": True} if language == "php" and not code.lstrip().startswith("<?") else {}
    try:
        return get_lexer_by_name(language, **options)
    except ClassNotFound:
        return None


def highlight_code(html: str, default_language: str = DEFAULT_CODE_LANGUAGE) -> str:
    """Apply Pygments highlighting to every ``pre > code`` block in ``html``.

    Blocks without a ``language-*`` class are tagged with ``default_language``.
    Languages Pygments does not know are tagged but left as plain text.
    """
    soup = parse_html(html)
    blocks = soup.select("pre > code")
    if not blocks:
        return html

    for code in blocks:
        classes = class_names(code)
        language_class = next((cls for cls in classes if cls.startswith(LANGUAGE_PREFIX)), None)
        if language_class is None:
            language_class = f"{LANGUAGE_PREFIX}{default_language}"
            classes.append(language_class)
            code["class"] = classes

        language = language_class[len(LANGUAGE_PREFIX) :]
        text = code.get_text()
        lexer = _lexer_for(language, text)
        if lexer is None:
            LOGGER.debug("No lexer for language %r, leaving block unhighlighted", language)
            continue

        tokens = parse_html(highlight(text, lexer, _FORMATTER))
        code.clear()
        for node in list(tokens.contents):
            code.append(node.extract())

        pre = code.parent
        pre_classes = class_names(pre)
        if language_class not in pre_classes:
            pre["class"] = pre_classes + [language_class]

    return str(soup)


def highlight_all(compiled: Mapping[str, str], default_language: str = DEFAULT_CODE_LANGUAGE) -> Dict[str, str]:
    """Highlight every fragment in a slug -> HTML mapping."""
    return {slug: highlight_code(html, default_language) for slug, html in compiled.items()}
