"""
Convert editor text (plain or rich-text HTML) into reportlab paragraph markup
"""
import html
import re
from xml.sax.saxutils import escape

_TAG_RE = re.compile(r'<(/?)([a-zA-Z][a-zA-Z0-9]*)([^>]*)>')
_BREAK_RUN_RE = re.compile(r'(?:<br/>\s*){3,}')
_EDGE_BREAK_RE = re.compile(r'^(?:\s*<br/>)+|(?:<br/>\s*)+$')

_INLINE_TAGS = {'b': 'b', 'strong': 'b', 'i': 'i', 'em': 'i', 'u': 'u', 'ins': 'u', 's': 'strike', 'strike': 'strike'}
_BLOCK_TAGS = {'p', 'div', 'h1', 'h2', 'h3', 'h4', 'h5', 'h6', 'blockquote', 'ul', 'ol', 'pre'}


def _convert_tag(match) -> str:
    closing, name = match.group(1), match.group(2).lower()
    if name == 'br':
        return '<br/>'
    if name == 'li':
        return '<br/>' if closing else '• '
    if name in _BLOCK_TAGS:
        return '<br/>' if closing else ''
    mapped = _INLINE_TAGS.get(name)
    if mapped:
        return f"</{mapped}>" if closing else f"<{mapped}>"
    return ''


def _text(chunk: str) -> str:
    return escape(html.unescape(chunk).replace('\n', ''))


def to_paragraph_markup(text: str) -> str:
    """
    Reduce editor content to the tag subset reportlab understands.

    Plain text is escaped and newlines become breaks. HTML keeps bold, italic,
    underline and strike; block elements become line breaks and list items
    become bullets. Anchors and unknown tags are dropped, keeping their text.
    """
    if not text:
        return ''
    text = str(text)
    if not _TAG_RE.search(text):
        return escape(text).replace('\n', '<br/>')

    parts = []
    pos = 0
    for match in _TAG_RE.finditer(text):
        parts.append(_text(text[pos:match.start()]))
        parts.append(_convert_tag(match))
        pos = match.end()
    parts.append(_text(text[pos:]))

    converted = _BREAK_RUN_RE.sub('<br/><br/>', ''.join(parts))
    return _EDGE_BREAK_RE.sub('', converted).strip()


def plain(text: str) -> str:
    """Escape a single-line value such as a name or company"""
    return escape(str(text or '').strip())
