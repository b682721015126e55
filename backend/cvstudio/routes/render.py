"""
Render routes - server-side PDF, thumbnail and pagination for CV templates
"""
import logging
from io import BytesIO

from flask import Blueprint, jsonify, request, send_file

from cvstudio.config import PAGE_HEIGHT_PX, PAGE_PROBE_OFFSET_PX, RENDER_RATE_LIMIT
from cvstudio.extensions import limiter
from cvstudio.services.export_gate import export_filename
from cvstudio.services.normalizer import normalize_document
from cvstudio.services.pagination import compute_current_page, compute_total_pages
from cvstudio.templates import (
    build_pdf,
    list_templates,
    measure_content_height,
    render_template,
    resolve_template_key,
)
from cvstudio.utils.exceptions import CVStudioException
from cvstudio.utils.validation import PaginationRequest, RenderRequest, validate_request

logger = logging.getLogger(__name__)

render_bp = Blueprint('render', __name__, url_prefix='/api/render')


def _load_document(schema):
    """Validate the JSON body and normalize it into a complete document"""
    payload = validate_request(schema, request.get_json(silent=True))
    record = {
        'title': payload.get('title'),
        'templateKey': payload.get('templateKey'),
        'settings': payload.get('settings'),
        'data': payload.get('data'),
    }
    return payload, normalize_document(record)


def _pdf_response(document, thumbnail: bool):
    try:
        pdf_bytes = build_pdf(document.templateKey, document.data, document.settings,
                              thumbnail=thumbnail, title=document.title)
    except CVStudioException:
        raise
    except Exception as e:
        logger.exception("render.pdf.failed", extra={"template": document.templateKey})
        raise CVStudioException("Failed to generate PDF", error_code="RENDER_FAILED",
                                details={'reason': str(e)})

    return send_file(
        BytesIO(pdf_bytes),
        mimetype='application/pdf',
        as_attachment=not thumbnail,
        download_name=export_filename(document.title),
    )


@render_bp.get('/templates')
def templates():
    """Available layouts with their default accent colours"""
    return jsonify({'templates': list_templates()})


@render_bp.post('/pdf')
@limiter.limit(RENDER_RATE_LIMIT)
def render_pdf():
    _, document = _load_document(RenderRequest)
    return _pdf_response(document, thumbnail=False)


@render_bp.post('/thumbnail')
@limiter.limit(RENDER_RATE_LIMIT)
def render_thumbnail():
    _, document = _load_document(RenderRequest)
    return _pdf_response(document, thumbnail=True)


@render_bp.post('/pagination')
@limiter.limit(RENDER_RATE_LIMIT)
def pagination():
    """Content height and page count of the full-size layout, in preview pixels"""
    payload, document = _load_document(PaginationRequest)
    story = render_template(document.templateKey, document.data, document.settings)
    content_height = measure_content_height(story)
    total_pages = compute_total_pages(content_height, PAGE_HEIGHT_PX)
    current_page = compute_current_page(payload.get('scrollOffset', 0), PAGE_HEIGHT_PX,
                                        total_pages, PAGE_PROBE_OFFSET_PX)
    return jsonify({
        'templateKey': resolve_template_key(document.templateKey),
        'contentHeight': round(content_height, 2),
        'pageHeight': PAGE_HEIGHT_PX,
        'totalPages': total_pages,
        'currentPage': current_page,
    })
