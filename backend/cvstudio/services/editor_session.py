"""
Editor session - one open CV: load, edit, autosave, paginate and export
"""
import logging
import threading
from typing import Any, Callable, List, Optional

from cvstudio.models.catalog import Template
from cvstudio.models.cv_document import CVDocument
from cvstudio.services.autosave import AutosaveScheduler
from cvstudio.services.export_gate import ExportGate, ExportResult
from cvstudio.services.normalizer import normalize_document
from cvstudio.services.pagination import PaginationObserver
from cvstudio.services import state_updater
from cvstudio.services.state_updater import UpdateResult
from cvstudio.utils.exceptions import CVStudioException, DocumentUnavailableError

logger = logging.getLogger(__name__)


class EditorSession:
    """
    Composes normalizer, updater, autosave, pagination and export gate.

    Edits are applied in call order; the scheduler is told about an edit
    only when the normalized value actually changed. Edits and the autosave
    thread's create callback replace the document under one shared lock.
    """

    def __init__(self, api_client, timer_factory: Callable = threading.Timer, delay: float = None,
                 redirect: Callable[[str], object] = None, download_dir: str = None, clock=None):
        self.api_client = api_client
        self._lock = threading.RLock()
        self.catalog: List[Template] = []
        self.document: CVDocument = CVDocument()
        self.pagination = PaginationObserver()

        scheduler_kwargs = {'timer_factory': timer_factory}
        if delay is not None:
            scheduler_kwargs['delay'] = delay
        self.scheduler = AutosaveScheduler(
            api_client,
            get_document=lambda: self.document,
            on_created=self._on_created,
            **scheduler_kwargs,
        )

        gate_kwargs = {}
        if redirect is not None:
            gate_kwargs['redirect'] = redirect
        if download_dir is not None:
            gate_kwargs['download_dir'] = download_dir
        self.gate = ExportGate(api_client, self.scheduler, clock=clock, **gate_kwargs)

    # ----------------------------------------
    # Lifecycle
    # ----------------------------------------

    def open(self, cv_id: Optional[str] = None, template_key: Optional[str] = None) -> CVDocument:
        """
        Load an existing CV, or start a blank one (optionally from a template).

        Raises DocumentUnavailableError when the CV cannot be loaded; the only
        way forward is back to the CV list.
        """
        try:
            self.catalog = self.api_client.fetch_templates()
        except CVStudioException as e:
            # Editing still works without the catalog; export falls back to the server check
            logger.warning("editor.catalog.unavailable", extra={"error": e.message})
            self.catalog = []

        record = None
        if cv_id:
            try:
                record = self.api_client.fetch_document(cv_id)
            except CVStudioException as e:
                logger.error("editor.load.failed", extra={"cv_id": cv_id, "error_code": e.error_code})
                raise DocumentUnavailableError(cv_id, details={'cause': e.error_code})
            if not record:
                raise DocumentUnavailableError(cv_id)

        document = normalize_document(record, template_override=template_key, catalog=self.catalog)
        if template_key and not cv_id:
            # "Use this template" also picks the template's own accent colour
            document = self._select(document, template_key).document
        with self._lock:
            self.document = document

        logger.info("editor.opened", extra={
            "cv_id": self.document.id,
            "template_key": self.document.templateKey,
        })
        return self.document

    def close(self):
        self.scheduler.close()

    # ----------------------------------------
    # Edits
    # ----------------------------------------

    def _apply(self, update: Callable[..., UpdateResult], *args) -> UpdateResult:
        # Read, compute and assign under one lock so a concurrent create keeps its id
        with self._lock:
            result = update(self.document, *args)
            if result.changed:
                self.document = result.document
        if result.changed:
            self.scheduler.notify_edit()
        return result

    def edit(self, path: str, value: Any) -> UpdateResult:
        return self._apply(state_updater.apply_update, path, value)

    def add_item(self, section) -> UpdateResult:
        return self._apply(state_updater.add_item, section)

    def update_item(self, section, index: int, field: Optional[str], value: Any) -> UpdateResult:
        return self._apply(state_updater.update_item, section, index, field, value)

    def remove_item(self, section, index: int) -> UpdateResult:
        return self._apply(state_updater.remove_item, section, index)

    def move_item(self, section, index: int, offset: int) -> UpdateResult:
        return self._apply(state_updater.move_item, section, index, offset)

    def set_month_year(self, section, index: int, field: str, year, month=None) -> UpdateResult:
        """Month/year pickers go through here so a month is never stored without a year"""
        return self._apply(state_updater.set_month_year, section, index, field, year, month)

    def _select(self, document: CVDocument, template_key: str) -> UpdateResult:
        match = next((t for t in self.catalog if t.key == template_key), None)
        return state_updater.select_template(document, template_key,
                                             template_id=match.id if match else None)

    def select_template(self, template_key: str) -> UpdateResult:
        return self._apply(self._select, template_key)

    # ----------------------------------------
    # Save, export, status
    # ----------------------------------------

    def save(self) -> bool:
        """Manual save; skipped for a still-empty new CV"""
        return self.scheduler.flush()

    def export(self, provider: str = 'stripe') -> ExportResult:
        return self.gate.export(self.catalog, provider=provider)

    @property
    def status(self) -> str:
        return self.scheduler.status

    def _on_created(self, record: dict):
        cv_id = record.get('_id') or record.get('id')
        if not cv_id:
            return
        update = {'id': str(cv_id)}
        if record.get('title'):
            update['title'] = record['title']
        with self._lock:
            self.document = self.document.model_copy(update=update)
