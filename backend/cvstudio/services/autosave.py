"""
Dirty-tracking autosave scheduler

State machine:
    CLEAN --edit--> DIRTY --delay elapses--> SAVING --ok--> CLEAN
                                             SAVING --error--> DIRTY

Each edit cancels and reissues the debounce timer. Only one save is ever in
flight; a save requested meanwhile runs after the current one settles.
"""
import logging
import threading
from typing import Any, Callable, Dict, Optional

from pydantic import BaseModel

from cvstudio.config import AUTOSAVE_DELAY_SECONDS, NEW_DOCUMENT_TITLE
from cvstudio.models.cv_document import CVDocument, SECTION_MODELS
from cvstudio.models.enums import SaveState
from cvstudio.services.state_updater import strip_markup
from cvstudio.utils.exceptions import CVStudioException

logger = logging.getLogger(__name__)

STATUS_LABELS = {
    SaveState.SAVING: "Saving…",
    SaveState.CLEAN: "Saved",
    SaveState.DIRTY: "Unsaved changes",
}


def _text_values(value: Any, default: Any = None):
    """Yield user-entered strings, skipping values equal to the field default"""
    if isinstance(value, BaseModel):
        for name, field in type(value).model_fields.items():
            yield from _text_values(getattr(value, name), field.get_default(call_default_factory=True))
    elif isinstance(value, str):
        if value != default:
            yield value


def has_substantive_content(document: CVDocument) -> bool:
    """
    True when any personal field or section entry holds visible text.

    Whitespace and empty editor markup such as '<p><br></p>' do not count,
    and neither do prefilled defaults of a freshly added entry.
    """
    data = document.data
    if data.personal.photo:
        return True
    if any(strip_markup(v) for v in _text_values(data.personal)):
        return True
    for kind in SECTION_MODELS:
        for item in data.section(kind):
            if any(strip_markup(v) for v in _text_values(item, "")):
                return True
    return False


def create_title(document: CVDocument) -> str:
    first_name = document.data.personal.firstName.strip()
    return f"{first_name}'s CV" if first_name else NEW_DOCUMENT_TITLE


class AutosaveScheduler:
    """
    Debounced saver for one open document.

    Args:
        api_client: Collaborator client (create_document / update_document)
        get_document: Returns the latest in-memory document at save time
        on_created: Called with the persisted record after the first create
        delay: Debounce window in seconds, measured from the latest edit
        timer_factory: threading.Timer compatible factory, injectable for tests
    """

    def __init__(
        self,
        api_client,
        get_document: Callable[[], CVDocument],
        on_created: Optional[Callable[[Dict[str, Any]], None]] = None,
        delay: float = AUTOSAVE_DELAY_SECONDS,
        timer_factory: Callable = threading.Timer,
    ):
        self.api_client = api_client
        self.get_document = get_document
        self.on_created = on_created
        self.delay = delay
        self.timer_factory = timer_factory

        self._cond = threading.Condition()
        self._state = SaveState.CLEAN
        self._timer = None
        self._revision = 0
        self._pending = False
        self._closed = False
        self.last_error: Optional[CVStudioException] = None

    # ----------------------------------------
    # State
    # ----------------------------------------

    @property
    def state(self) -> SaveState:
        return self._state

    @property
    def status(self) -> str:
        return STATUS_LABELS[self._state]

    @property
    def is_dirty(self) -> bool:
        return self._state is SaveState.DIRTY

    # ----------------------------------------
    # Triggers
    # ----------------------------------------

    def notify_edit(self):
        """Mark the document dirty and restart the debounce window"""
        with self._cond:
            if self._closed:
                return
            self._revision += 1
            if self._state is not SaveState.SAVING:
                # An edit during a save is picked up when that save settles
                self._state = SaveState.DIRTY
            self._restart_timer()

    def flush(self, force: bool = False, raise_errors: bool = False) -> bool:
        """
        Save now instead of waiting for the timer.

        force=True saves unconditionally: even when clean or still empty,
        waiting for any in-flight save to settle first. Returns True when a
        save succeeded.
        """
        with self._cond:
            self._cancel_timer()
            if force:
                while self._state is SaveState.SAVING:
                    self._cond.wait()
        return self._save(force=force, raise_errors=raise_errors)

    def close(self):
        """Stop the pending timer; unsaved edits stay unsaved"""
        with self._cond:
            self._closed = True
            self._cancel_timer()
        logger.debug("autosave.closed", extra={"state": self._state.value})

    # ----------------------------------------
    # Internals
    # ----------------------------------------

    def _restart_timer(self):
        self._cancel_timer()
        timer = self.timer_factory(self.delay, self._on_timer)
        timer.daemon = True
        self._timer = timer
        timer.start()

    def _cancel_timer(self):
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _on_timer(self):
        with self._cond:
            self._timer = None
            if self._closed:
                return
        self._save()

    def _save(self, force: bool = False, raise_errors: bool = False) -> bool:
        with self._cond:
            if self._state is SaveState.SAVING:
                self._pending = True
                logger.debug("autosave.save.deferred")
                return False
            if not force and self._state is not SaveState.DIRTY:
                return False

            document = self.get_document()
            if not document.id and not force and not has_substantive_content(document):
                logger.debug("autosave.save.skipped_empty")
                return False

            revision = self._revision
            self._state = SaveState.SAVING

        error = None
        try:
            self._persist(document)
        except CVStudioException as e:
            error = e
            logger.warning("autosave.save.failed", extra={
                "cv_id": document.id,
                "error_code": e.error_code,
                "error": e.message,
            })

        with self._cond:
            self.last_error = error
            if error is None and self._revision == revision:
                self._state = SaveState.CLEAN
                logger.info("autosave.save.complete", extra={"cv_id": self.get_document().id})
            else:
                self._state = SaveState.DIRTY
            rerun = self._pending and not self._closed
            self._pending = False
            self._cond.notify_all()

        if rerun:
            self._save()
        if error is not None and raise_errors:
            raise error
        return error is None

    def _persist(self, document: CVDocument):
        payload = document.to_payload()
        if document.id:
            self.api_client.update_document(document.id, payload)
            return

        payload['title'] = create_title(document)
        record = self.api_client.create_document(payload) or {}
        logger.info("autosave.document.created", extra={"cv_id": record.get('_id') or record.get('id')})
        if self.on_created:
            self.on_created(record)
