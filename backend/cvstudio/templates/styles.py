"""
Paragraph styles for CV layouts

Styles are built per render call from the document's settings so no template
can leak changes into another one's defaults.
"""
import re
from typing import Any, Dict

from reportlab.lib.colors import Color, HexColor, white
from reportlab.lib.enums import TA_CENTER, TA_LEFT
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet

from cvstudio.models.cv_document import StyleSettings
from cvstudio.templates.registry import default_accent_color, default_font

_HEX_RE = re.compile(r'^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$')

BASE_FONT_SIZE = 10.0
MUTED = HexColor("#64748b")
TEXT = HexColor("#1f2937")

_FONT_FAMILIES = {
    'Helvetica': ('Helvetica', 'Helvetica-Bold', 'Helvetica-Oblique'),
    'Times-Roman': ('Times-Roman', 'Times-Bold', 'Times-Italic'),
    'Courier': ('Courier', 'Courier-Bold', 'Courier-Oblique'),
}


def resolve_font_family(font: str, template_key: str):
    """Map the editor's font choice onto a built-in PDF font family"""
    name = (font or '').lower()
    if 'mono' in name or 'courier' in name:
        return _FONT_FAMILIES['Courier']
    if any(serif in name for serif in ('times', 'georgia', 'garamond', 'merriweather', 'playfair')) or (
            'serif' in name and 'sans' not in name):
        return _FONT_FAMILIES['Times-Roman']
    if name in ('', 'inter', 'default'):
        return _FONT_FAMILIES[default_font(template_key)]
    return _FONT_FAMILIES['Helvetica']


def resolve_accent(settings: StyleSettings, template_key: str) -> Color:
    color = settings.themeColor if settings else None
    if not color or not _HEX_RE.match(color):
        color = default_accent_color(template_key)
    if len(color) == 4:
        color = '#' + ''.join(c * 2 for c in color[1:])
    return HexColor(color)


def build_styles(settings: StyleSettings, template_key: str, scale: float = 1.0) -> Dict[str, Any]:
    """
    Build the style set for one render.

    Args:
        settings: Document style settings (fontSize and lineSpacing are percentages)
        template_key: Layout key, used for font and accent fallbacks
        scale: Thumbnail scale factor applied to every size

    Returns:
        Dict of ParagraphStyles keyed by role
    """
    settings = settings or StyleSettings()
    regular, bold, italic = resolve_font_family(settings.font, template_key)
    accent = resolve_accent(settings, template_key)

    size = BASE_FONT_SIZE * (settings.fontSize or 100) / 100.0 * scale
    leading = size * 1.3 * (settings.lineSpacing or 100) / 100.0

    sample = getSampleStyleSheet()
    body = ParagraphStyle(
        "CVBody",
        parent=sample["BodyText"],
        fontName=regular,
        fontSize=size,
        leading=leading,
        textColor=TEXT,
        alignment=TA_LEFT,
        spaceAfter=2 * scale,
    )

    return {
        'accent': accent,
        'body': body,
        'name': ParagraphStyle(
            "CVName",
            parent=body,
            fontName=bold,
            fontSize=size * 2.4,
            leading=size * 2.8,
            spaceAfter=2 * scale,
        ),
        'name_centered': ParagraphStyle(
            "CVNameCentered",
            parent=body,
            fontName=bold,
            fontSize=size * 2.4,
            leading=size * 2.8,
            alignment=TA_CENTER,
            spaceAfter=2 * scale,
        ),
        'name_inverse': ParagraphStyle(
            "CVNameInverse",
            parent=body,
            fontName=bold,
            fontSize=size * 2.4,
            leading=size * 2.8,
            textColor=white,
        ),
        'job_title': ParagraphStyle(
            "CVJobTitle",
            parent=body,
            fontSize=size * 1.2,
            leading=size * 1.5,
            textColor=MUTED,
            spaceAfter=6 * scale,
        ),
        'job_title_centered': ParagraphStyle(
            "CVJobTitleCentered",
            parent=body,
            fontSize=size * 1.2,
            leading=size * 1.5,
            textColor=MUTED,
            alignment=TA_CENTER,
            spaceAfter=6 * scale,
        ),
        'inverse': ParagraphStyle(
            "CVInverse",
            parent=body,
            textColor=white,
        ),
        'contact': ParagraphStyle(
            "CVContact",
            parent=body,
            fontSize=size * 0.9,
            textColor=MUTED,
        ),
        'contact_centered': ParagraphStyle(
            "CVContactCentered",
            parent=body,
            fontSize=size * 0.9,
            textColor=MUTED,
            alignment=TA_CENTER,
            spaceAfter=6 * scale,
        ),
        'section': ParagraphStyle(
            "CVSection",
            parent=body,
            fontName=bold,
            fontSize=size * 1.3,
            leading=size * 1.6,
            textColor=accent,
            spaceBefore=10 * scale,
            spaceAfter=4 * scale,
        ),
        'entry_title': ParagraphStyle(
            "CVEntryTitle",
            parent=body,
            fontName=bold,
            fontSize=size * 1.05,
            spaceBefore=4 * scale,
            spaceAfter=1 * scale,
        ),
        'meta': ParagraphStyle(
            "CVMeta",
            parent=body,
            fontName=italic,
            fontSize=size * 0.9,
            textColor=MUTED,
        ),
        'small': ParagraphStyle(
            "CVSmall",
            parent=body,
            fontName=italic,
            fontSize=size * 0.75,
            leading=size * 0.95,
            textColor=MUTED,
        ),
    }
