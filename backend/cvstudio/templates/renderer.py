"""
Template renderer - turn CV data into reportlab stories and PDF bytes
"""
import logging
from io import BytesIO
from typing import Dict, List, Optional, Union

from reportlab.lib.pagesizes import A4
from reportlab.lib.units import inch
from reportlab.platypus import Flowable, SimpleDocTemplate

from cvstudio.config import PAGE_HEIGHT_PX, THUMBNAIL_SCALE
from cvstudio.models.cv_document import CVData, StyleSettings
from cvstudio.templates.layouts import LAYOUTS
from cvstudio.templates.registry import resolve_template_key
from cvstudio.templates.styles import build_styles

logger = logging.getLogger(__name__)

MARGIN = 0.6 * inch


def _scale(thumbnail: bool) -> float:
    return THUMBNAIL_SCALE if thumbnail else 1.0


def page_geometry(thumbnail: bool = False):
    """Return (page_size, margin, frame_width, frame_height) in points"""
    scale = _scale(thumbnail)
    page_width, page_height = A4[0] * scale, A4[1] * scale
    margin = MARGIN * scale
    return (page_width, page_height), margin, page_width - 2 * margin, page_height - 2 * margin


def _coerce(data: Union[CVData, Dict, None], settings: Union[StyleSettings, Dict, None]):
    if not isinstance(data, CVData):
        data = CVData.model_validate(data or {})
    if not isinstance(settings, StyleSettings):
        settings = StyleSettings.model_validate(settings or {})
    return data, settings


def render_template(template_key: str, data, settings=None, thumbnail: bool = False) -> List[Flowable]:
    """
    Build the flowable story for one template.

    Pure: styles are created for this call only and nothing outside the
    arguments is read. Thumbnail mode shrinks every size and drops links.
    """
    data, settings = _coerce(data, settings)
    key = resolve_template_key(template_key)
    scale = _scale(thumbnail)
    styles = build_styles(settings, key, scale=scale)
    _, _, frame_width, _ = page_geometry(thumbnail)
    return LAYOUTS[key](data, styles, not thumbnail, scale, frame_width)


def build_pdf(template_key: str, data, settings=None, thumbnail: bool = False,
              title: Optional[str] = None) -> bytes:
    """Render the CV onto A4 pages (or a scaled-down thumbnail page) and return the PDF bytes"""
    story = render_template(template_key, data, settings, thumbnail=thumbnail)
    pagesize, margin, _, _ = page_geometry(thumbnail)

    buffer = BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=pagesize,
        leftMargin=margin,
        rightMargin=margin,
        topMargin=margin,
        bottomMargin=margin,
        title=title or "CV",
    )
    doc.build(story)
    pdf_bytes = buffer.getvalue()
    buffer.close()

    logger.info("render.pdf.built", extra={
        "template": resolve_template_key(template_key),
        "thumbnail": thumbnail,
        "bytes": len(pdf_bytes),
    })
    return pdf_bytes


def measure_content_height(flowables: List[Flowable], thumbnail: bool = False) -> float:
    """
    Height of a story laid out in one unbroken column, in preview pixels.

    One frame height of points maps onto PAGE_HEIGHT_PX so the result can be
    fed straight into the pagination helpers.
    """
    _, _, frame_width, frame_height = page_geometry(thumbnail)
    total = 0.0
    previous_after = 0.0
    for flowable in flowables:
        _, height = flowable.wrap(frame_width, frame_height * 1000)
        before = flowable.getSpaceBefore()
        # Adjacent spacing collapses to the larger of the two, as in a frame
        total += height + max(before, previous_after) - previous_after
        previous_after = flowable.getSpaceAfter()
        total += previous_after
    return total * PAGE_HEIGHT_PX / frame_height
