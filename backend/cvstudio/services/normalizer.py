"""
Document normalizer - turn a possibly partial persisted CV record into a complete document
"""
import logging
from typing import Any, Dict, Iterable, Optional

from cvstudio.config import DEFAULT_TEMPLATE_KEY
from cvstudio.models.catalog import Template
from cvstudio.models.cv_document import CVData, CVDocument

logger = logging.getLogger(__name__)

_DATA_KEYS = set(CVData.model_fields)


def _resolve_template(record: Dict[str, Any], template_override: Optional[str],
                      catalog: Optional[Iterable[Template]]):
    """Return (template_key, template_id) following override > record > catalog > default"""
    template_ref = record.get('templateId')
    template_id = None
    populated_key = None

    if isinstance(template_ref, dict):
        template_id = template_ref.get('_id') or template_ref.get('id')
        populated_key = template_ref.get('key')
    elif template_ref:
        template_id = str(template_ref)

    if template_override:
        key = template_override
    else:
        key = record.get('templateKey') or populated_key
        if not key and template_id and catalog:
            match = next((t for t in catalog if t.id == template_id), None)
            key = match.key if match else None

    if template_override and catalog:
        # A new template pointer must travel with the override
        match = next((t for t in catalog if t.key == template_override), None)
        if match:
            template_id = match.id

    return key or DEFAULT_TEMPLATE_KEY, template_id


def normalize_document(
    record: Optional[Dict[str, Any]],
    template_override: Optional[str] = None,
    catalog: Optional[Iterable[Template]] = None,
) -> CVDocument:
    """
    Build a schema-complete CVDocument from a persisted record.

    Args:
        record: Persisted CV as returned by the API (may be None or partial).
            A bare data payload such as {"personal": {...}} is accepted too.
        template_override: Template key chosen by a "create from template" action;
            wins over the persisted template reference
        catalog: Optional template catalog used to map template ids to keys

    Returns:
        CVDocument whose sections are all present (empty lists when absent)
    """
    record = dict(record or {})
    catalog = list(catalog) if catalog is not None else None

    if 'data' not in record and _DATA_KEYS.intersection(record):
        record = {'data': {k: record.pop(k) for k in list(record) if k in _DATA_KEYS}, **record}

    template_key, template_id = _resolve_template(record, template_override, catalog)
    record['templateKey'] = template_key
    record['templateId'] = template_id

    document = CVDocument.model_validate(record)
    logger.debug("normalizer.document", extra={
        "cv_id": document.id,
        "template_key": document.templateKey,
    })
    return document
