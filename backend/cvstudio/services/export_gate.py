"""
Export/paywall gate - save, check entitlement, then download or go to checkout
"""
import json
import logging
import os
import re
import webbrowser
from datetime import datetime, timezone
from typing import Callable, Iterable, NamedTuple, Optional

from cvstudio.config import DOWNLOAD_DIR
from cvstudio.models.catalog import Template
from cvstudio.models.cv_document import CVDocument
from cvstudio.models.enums import ExportStatus
from cvstudio.templates.registry import resolve_template_key
from cvstudio.utils.exceptions import CVStudioException, ExportFormatError, ExternalAPIError

logger = logging.getLogger(__name__)

_UNSAFE_FILENAME_RE = re.compile(r'[\\/:*?"<>|\x00-\x1f]+')


class ExportResult(NamedTuple):
    status: ExportStatus
    path: Optional[str] = None
    checkout_url: Optional[str] = None


def export_filename(title: str) -> str:
    name = _UNSAFE_FILENAME_RE.sub(' ', title or '').strip(' .')
    return f"{name or 'CV'}.pdf"


def find_template(document: CVDocument, catalog: Iterable[Template]) -> Optional[Template]:
    """Catalog entry for the document: by id first, then by (resolved) key"""
    catalog = list(catalog or [])
    if document.templateId:
        match = next((t for t in catalog if t.id == document.templateId), None)
        if match:
            return match
    match = next((t for t in catalog if t.key == document.templateKey), None)
    if match:
        return match
    key = resolve_template_key(document.templateKey)
    return next((t for t in catalog if resolve_template_key(t.key) == key), None)


def parse_export_error(content: bytes, fallback: str = "Failed to generate PDF") -> str:
    text = (content or b'').decode('utf-8', errors='replace').strip()
    try:
        body = json.loads(text)
    except ValueError:
        return text or fallback
    if isinstance(body, dict):
        return body.get('msg') or body.get('message') or body.get('error') or fallback
    return text or fallback


class ExportGate:
    """
    Guards PDF export of restricted templates.

    Args:
        api_client: Collaborator client
        scheduler: AutosaveScheduler of the open document
        download_dir: Where exported PDFs are written
        redirect: Receives the checkout URL (opens the browser by default)
        clock: Returns "now" as an aware datetime, injectable for tests
    """

    def __init__(self, api_client, scheduler, download_dir: str = DOWNLOAD_DIR,
                 redirect: Callable[[str], object] = webbrowser.open,
                 clock: Callable[[], datetime] = None):
        self.api_client = api_client
        self.scheduler = scheduler
        self.download_dir = download_dir
        self.redirect = redirect
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    def export(self, catalog: Iterable[Template], provider: str = 'stripe') -> ExportResult:
        document = self._save()
        template = find_template(document, catalog)

        if template is not None and template.is_restricted and not self._is_entitled(document):
            return self._checkout(document, template, provider)

        return self._download(document)

    def _save(self) -> CVDocument:
        # The persisted record must reflect the current template before any check
        try:
            self.scheduler.flush(force=True, raise_errors=True)
        except ExternalAPIError as e:
            logger.error("export.save.failed", extra={"error": e.message})
            raise ExternalAPIError("CV API", "Could not save your CV before export. Please try again.",
                                   details=e.details)

        document = self.scheduler.get_document()
        if not document.id:
            raise ExternalAPIError("CV API", "Please wait for the CV to save or enter some details first.")
        return document

    def _is_entitled(self, document: CVDocument) -> bool:
        now = self.clock()
        entitlement = self.api_client.fetch_entitlement()
        if entitlement.has_global_access(now) or entitlement.has_document_purchase(document.id, now):
            return True
        if document.isPaid:
            return True
        record = self.api_client.fetch_document(document.id) or {}
        return bool(record.get('isPaid'))

    def _checkout(self, document: CVDocument, template: Template, provider: str) -> ExportResult:
        template_id = template.id or document.templateId
        session = self.api_client.create_checkout_session(document.id, template_id, provider=provider)
        url = session.get('url')
        logger.info("export.checkout.redirect", extra={
            "cv_id": document.id,
            "template": template.key,
            "category": template.category,
        })
        if url:
            self.redirect(url)
        return ExportResult(ExportStatus.CHECKOUT, checkout_url=url)

    def _download(self, document: CVDocument) -> ExportResult:
        artifact = self.api_client.export_document(document.id)
        if not artifact.is_pdf:
            message = parse_export_error(artifact.content)
            logger.warning("export.format.invalid", extra={
                "cv_id": document.id,
                "content_type": artifact.content_type,
            })
            raise ExportFormatError(message, content_type=artifact.content_type)

        os.makedirs(self.download_dir, exist_ok=True)
        path = os.path.join(self.download_dir, export_filename(document.title))
        try:
            with open(path, 'wb') as f:
                f.write(artifact.content)
        except OSError as e:
            raise CVStudioException(f"Could not write {path}: {e}", error_code="DOWNLOAD_FAILED")

        logger.info("export.downloaded", extra={"cv_id": document.id, "bytes": len(artifact.content)})
        return ExportResult(ExportStatus.DOWNLOADED, path=path)
