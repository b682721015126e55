"""
Tests for the autosave scheduler
"""
import pytest

from cvstudio.models import SaveState
from cvstudio.services.autosave import AutosaveScheduler, create_title, has_substantive_content
from cvstudio.services.normalizer import normalize_document
from cvstudio.services.state_updater import add_item, apply_update
from cvstudio.utils.exceptions import ExternalAPIError


class Holder:
    """Stands in for the editor: owns the current document"""

    def __init__(self, document):
        self.document = document

    def edit(self, scheduler, path, value):
        result = apply_update(self.document, path, value)
        if result.changed:
            self.document = result.document
            scheduler.notify_edit()
        return result

    def on_created(self, record):
        self.document = self.document.model_copy(update={'id': record['_id']})


@pytest.fixture
def holder():
    return Holder(normalize_document(None))


@pytest.fixture
def scheduler(fake_api, holder, timer_factory):
    return AutosaveScheduler(
        fake_api,
        get_document=lambda: holder.document,
        on_created=holder.on_created,
        delay=3.0,
        timer_factory=timer_factory,
    )


class TestSubstantiveContent:
    """What counts as a started CV"""

    def test_blank_document(self):
        assert has_substantive_content(normalize_document(None)) is False

    def test_whitespace_and_empty_markup(self):
        document = normalize_document({'personal': {'firstName': '   ', 'summary': '<p><br></p>'}})
        assert has_substantive_content(document) is False

    def test_freshly_added_items(self):
        document = normalize_document(None)
        for section in ('experience', 'languages', 'skills'):
            document = add_item(document, section).document
        assert has_substantive_content(document) is False

    def test_personal_field(self):
        assert has_substantive_content(normalize_document({'personal': {'email': 'a@b.c'}})) is True

    def test_section_item_text(self):
        document = normalize_document({'experience': [{'company': 'Acme'}]})
        assert has_substantive_content(document) is True

    def test_skill(self):
        assert has_substantive_content(normalize_document({'skills': ['Go']})) is True

    def test_create_title(self):
        assert create_title(normalize_document({'personal': {'firstName': 'Ann'}})) == "Ann's CV"
        assert create_title(normalize_document(None)) == "New CV"


class TestDebounce:
    """Each edit restarts the timer"""

    def test_edit_marks_dirty(self, scheduler, holder):
        holder.edit(scheduler, 'data.personal.firstName', 'Ann')
        assert scheduler.state is SaveState.DIRTY
        assert scheduler.status == "Unsaved changes"

    def test_timer_restarted(self, scheduler, holder, timer_factory):
        holder.edit(scheduler, 'data.personal.firstName', 'Ann')
        holder.edit(scheduler, 'data.personal.lastName', 'Lee')

        assert len(timer_factory.timers) == 2
        assert timer_factory.timers[0].cancelled is True
        assert timer_factory.active == [timer_factory.timers[1]]
        assert timer_factory.timers[1].interval == 3.0

    def test_repeated_value_one_dirty_transition(self, scheduler, holder, timer_factory):
        holder.edit(scheduler, 'data.personal.jobTitle', 'Engineer')
        holder.edit(scheduler, 'data.personal.jobTitle', 'Engineer')
        assert len(timer_factory.timers) == 1

    def test_close_cancels_timer(self, scheduler, holder, timer_factory):
        holder.edit(scheduler, 'data.personal.firstName', 'Ann')
        scheduler.close()
        assert timer_factory.active == []

        holder.edit(scheduler, 'data.personal.lastName', 'Lee')
        assert timer_factory.active == []


class TestCreateThenUpdate:
    """New CVs are created once, then updated"""

    def test_empty_document_never_created(self, scheduler, holder, fake_api, timer_factory):
        holder.edit(scheduler, 'data.personal.summary', '<p> </p>')
        holder.document = add_item(holder.document, 'experience').document
        scheduler.notify_edit()
        timer_factory.fire_latest()

        assert fake_api.calls_named('create_document') == []
        assert scheduler.state is SaveState.DIRTY

    def test_first_save_creates_then_updates(self, scheduler, holder, fake_api, timer_factory):
        holder.edit(scheduler, 'data.personal.firstName', 'Ann')
        timer_factory.fire_latest()

        creates = fake_api.calls_named('create_document')
        assert len(creates) == 1
        assert creates[0][1]['title'] == "Ann's CV"
        assert holder.document.id == 'cv-1'
        assert scheduler.state is SaveState.CLEAN
        assert scheduler.status == "Saved"

        holder.edit(scheduler, 'data.personal.lastName', 'Lee')
        timer_factory.fire_latest()
        holder.edit(scheduler, 'data.personal.lastName', 'Li')
        timer_factory.fire_latest()

        assert len(fake_api.calls_named('create_document')) == 1
        updates = fake_api.calls_named('update_document')
        assert [u[1] for u in updates] == ['cv-1', 'cv-1']
        assert updates[-1][2]['data']['personal']['lastName'] == 'Li'

    def test_existing_document_updates_even_when_empty(self, fake_api, timer_factory):
        holder = Holder(normalize_document({'_id': 'cv-9'}))
        scheduler = AutosaveScheduler(fake_api, lambda: holder.document, timer_factory=timer_factory)
        holder.edit(scheduler, 'title', 'Blank')
        timer_factory.fire_latest()

        assert len(fake_api.calls_named('update_document')) == 1
        assert fake_api.calls_named('create_document') == []


class TestFailures:
    """Failed saves stay dirty without retrying"""

    def test_failure_leaves_dirty(self, scheduler, holder, fake_api, timer_factory):
        fake_api.fail_saves = True
        holder.edit(scheduler, 'data.personal.firstName', 'Ann')
        timer_factory.fire_latest()

        assert scheduler.state is SaveState.DIRTY
        assert isinstance(scheduler.last_error, ExternalAPIError)
        assert timer_factory.active == []
        assert len(fake_api.calls_named('create_document')) == 1

    def test_next_edit_retries(self, scheduler, holder, fake_api, timer_factory):
        fake_api.fail_saves = True
        holder.edit(scheduler, 'data.personal.firstName', 'Ann')
        timer_factory.fire_latest()

        fake_api.fail_saves = False
        holder.edit(scheduler, 'data.personal.lastName', 'Lee')
        timer_factory.fire_latest()

        assert scheduler.state is SaveState.CLEAN
        assert scheduler.last_error is None

    def test_forced_flush_raises(self, scheduler, holder, fake_api):
        fake_api.fail_saves = True
        holder.edit(scheduler, 'data.personal.firstName', 'Ann')
        with pytest.raises(ExternalAPIError):
            scheduler.flush(force=True, raise_errors=True)


class TestInFlightSaves:
    """One save at a time; edits during a save keep the document dirty"""

    def test_edit_during_save_leaves_dirty(self, scheduler, holder, fake_api, timer_factory):
        holder.edit(scheduler, 'data.personal.firstName', 'Ann')
        timer_factory.fire_latest()

        original_update = fake_api.update_document

        def update_while_typing(cv_id, payload):
            assert scheduler.state is SaveState.SAVING
            assert scheduler.status == "Saving…"
            holder.edit(scheduler, 'data.personal.lastName', 'Lee')
            return original_update(cv_id, payload)

        fake_api.update_document = update_while_typing
        holder.edit(scheduler, 'data.personal.jobTitle', 'Engineer')
        timer_factory.fire_latest()

        assert scheduler.state is SaveState.DIRTY
        assert len(timer_factory.active) == 1

        fake_api.update_document = original_update
        timer_factory.fire_latest()
        assert scheduler.state is SaveState.CLEAN
        assert fake_api.documents['cv-1']['data']['personal']['lastName'] == 'Lee'

    def test_save_requested_during_save_runs_after(self, scheduler, holder, fake_api, timer_factory):
        holder.edit(scheduler, 'data.personal.firstName', 'Ann')
        timer_factory.fire_latest()

        in_flight = []
        max_in_flight = []
        original_update = fake_api.update_document

        def slow_update(cv_id, payload):
            in_flight.append(cv_id)
            max_in_flight.append(len(in_flight))
            if len(fake_api.calls_named('update_document')) == 0:
                holder.edit(scheduler, 'data.personal.lastName', 'Lee')
                # The debounce elapses while the first request is still open
                timer_factory.fire_latest()
            result = original_update(cv_id, payload)
            in_flight.pop()
            return result

        fake_api.update_document = slow_update
        holder.edit(scheduler, 'data.personal.jobTitle', 'Engineer')
        timer_factory.fire_latest()

        assert len(fake_api.calls_named('update_document')) == 2
        assert max(max_in_flight) == 1
        assert scheduler.state is SaveState.CLEAN


class TestFlush:
    """Manual and forced saves"""

    def test_forced_flush_saves_clean_document(self, fake_api, timer_factory):
        holder = Holder(normalize_document({'_id': 'cv-3'}))
        scheduler = AutosaveScheduler(fake_api, lambda: holder.document, timer_factory=timer_factory)

        assert scheduler.flush(force=True) is True
        assert len(fake_api.calls_named('update_document')) == 1

    def test_plain_flush_skips_clean_document(self, fake_api, timer_factory):
        holder = Holder(normalize_document({'_id': 'cv-3'}))
        scheduler = AutosaveScheduler(fake_api, lambda: holder.document, timer_factory=timer_factory)

        assert scheduler.flush() is False
        assert fake_api.calls == []

    def test_flush_cancels_pending_timer(self, scheduler, holder, timer_factory, fake_api):
        holder.edit(scheduler, 'data.personal.firstName', 'Ann')
        assert scheduler.flush() is True
        assert timer_factory.active == []
        assert len(fake_api.calls_named('create_document')) == 1
