"""
Pytest configuration and fixtures
"""
import os
from unittest.mock import Mock

import pytest

# Set test environment
os.environ['FLASK_ENV'] = 'testing'

from cvstudio.models.catalog import Entitlement, Template
from cvstudio.services.api_client import ExportArtifact
from cvstudio.utils.exceptions import ExternalAPIError


class ManualTimer:
    """threading.Timer stand-in that only fires when told to"""

    def __init__(self, interval, function):
        self.interval = interval
        self.function = function
        self.cancelled = False
        self.started = False
        self.fired = False
        self.daemon = False

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def fire(self):
        if not self.cancelled:
            self.fired = True
            self.function()


class ManualTimerFactory:
    def __init__(self):
        self.timers = []

    def __call__(self, interval, function):
        timer = ManualTimer(interval, function)
        self.timers.append(timer)
        return timer

    @property
    def active(self):
        return [t for t in self.timers if t.started and not t.cancelled and not t.fired]

    def fire_latest(self):
        self.timers[-1].fire()


class FakeApiClient:
    """In-memory collaborator API recording every call"""

    def __init__(self):
        self.calls = []
        self.templates = [
            Template(id='tpl-modern', key='modern', name='Modern', category='Free', price=0),
            Template(id='tpl-classic', key='classic', name='Classic', category='Basic', price=0),
            Template(id='tpl-exec', key='executive', name='Executive', category='Pro', price=4.99),
            Template(id='tpl-elegant', key='elegant', name='Elegant', category='Premium', price=9.99),
        ]
        self.documents = {}
        self.entitlement = Entitlement()
        self.artifact = ExportArtifact(b'%PDF-1.4 fake', 'application/pdf')
        self.fail_saves = False
        self.next_id = 1

    def _record(self, name, *args):
        self.calls.append((name,) + args)

    def calls_named(self, name):
        return [c for c in self.calls if c[0] == name]

    def fetch_templates(self):
        self._record('fetch_templates')
        return list(self.templates)

    def fetch_document(self, cv_id):
        self._record('fetch_document', cv_id)
        return self.documents.get(cv_id)

    def create_document(self, payload):
        self._record('create_document', payload)
        if self.fail_saves:
            raise ExternalAPIError("CV API", "connection refused")
        cv_id = f"cv-{self.next_id}"
        self.next_id += 1
        record = {'_id': cv_id, **payload}
        self.documents[cv_id] = record
        return record

    def update_document(self, cv_id, payload):
        self._record('update_document', cv_id, payload)
        if self.fail_saves:
            raise ExternalAPIError("CV API", "connection refused")
        self.documents[cv_id] = {**self.documents.get(cv_id, {}), '_id': cv_id, **payload}
        return self.documents[cv_id]

    def delete_document(self, cv_id):
        self._record('delete_document', cv_id)
        self.documents.pop(cv_id, None)

    def export_document(self, cv_id):
        self._record('export_document', cv_id)
        return self.artifact

    def create_checkout_session(self, cv_id, template_id, provider='stripe'):
        self._record('create_checkout_session', cv_id, template_id, provider)
        return {'id': 'cs_test_1', 'url': 'https://checkout.example.com/cs_test_1'}

    def fetch_entitlement(self):
        self._record('fetch_entitlement')
        return self.entitlement


@pytest.fixture
def app():
    """Create Flask app for testing"""
    from wsgi import create_app
    app = create_app({'TESTING': True, 'RATELIMIT_ENABLED': False})
    return app


@pytest.fixture
def client(app):
    """Create test client"""
    return app.test_client()


@pytest.fixture
def timer_factory():
    return ManualTimerFactory()


@pytest.fixture
def fake_api():
    return FakeApiClient()


@pytest.fixture
def redirect():
    return Mock()


@pytest.fixture
def sample_record():
    """Persisted CV as the API returns it (populated template reference)"""
    return {
        '_id': 'cv-42',
        'title': "Ann's CV",
        'templateId': {'_id': 'tpl-classic', 'key': 'classic', 'category': 'Basic'},
        'settings': {'themeColor': '#dc2626', 'font': 'Inter'},
        'isPaid': False,
        'data': {
            'personal': {
                'firstName': 'Ann',
                'lastName': 'Lee',
                'jobTitle': 'Data Engineer',
                'email': 'ann@example.com',
                'summary': '<p>Builds <strong>pipelines</strong> &amp; tools.</p>',
            },
            'experience': [
                {
                    'title': 'Engineer',
                    'company': 'Acme',
                    'startDate': '2020-03',
                    'current': True,
                    'description': '<ul><li>Shipped ETL</li><li>Cut costs</li></ul>',
                },
            ],
            'education': [
                {'school': 'State University', 'degree': 'BSc', 'field': 'CS', 'startDate': 2014, 'endDate': '2018'},
            ],
            'skills': [{'name': 'Python', 'level': 'Expert'}, 'SQL'],
            'languages': [{'name': 'English'}],
            'links': [{'name': 'GitHub', 'url': 'github.com/ann'}],
        },
    }
