"""
Tests for the render and health endpoints
"""
import pytest

LONG_DATA = {
    'personal': {'firstName': 'Ann', 'lastName': 'Lee'},
    'experience': [
        {'title': f'Role {i}', 'company': 'Acme', 'description': '<p>' + 'Delivered results. ' * 40 + '</p>'}
        for i in range(12)
    ],
}


@pytest.fixture
def payload(sample_record):
    return {
        'templateKey': 'executive',
        'title': 'Resume',
        'data': sample_record['data'],
        'settings': {'themeColor': '#0f766e'},
    }


class TestHealth:
    def test_ping(self, client):
        response = client.get('/ping')
        assert response.status_code == 200
        assert response.data == b'pong'

    def test_health(self, client):
        body = client.get('/health').get_json()
        assert body['status'] == 'healthy'
        assert 'timeline' in body['templates']
        assert body['services']['renderer'] == 'reportlab'

    def test_healthz(self, client):
        assert client.get('/healthz').get_json() == {'status': 'ok'}

    def test_unknown_route(self, client):
        response = client.get('/api/nope')
        assert response.status_code == 404
        assert response.get_json()['error_code'] == 'NOT_FOUND'


class TestTemplatesEndpoint:
    def test_lists_layouts(self, client):
        response = client.get('/api/render/templates')
        templates = response.get_json()['templates']

        assert response.status_code == 200
        assert len(templates) == 6
        assert {'key': 'executive', 'accentColor': '#eab37a'}.items() <= templates[4].items()


class TestPdfEndpoints:
    """Full-size download and inline thumbnail"""

    def test_pdf(self, client, payload):
        response = client.post('/api/render/pdf', json=payload)

        assert response.status_code == 200
        assert response.mimetype == 'application/pdf'
        assert response.data.startswith(b'%PDF')
        disposition = response.headers['Content-Disposition']
        assert disposition.startswith('attachment')
        assert 'Resume.pdf' in disposition

    def test_thumbnail_inline(self, client, payload):
        response = client.post('/api/render/thumbnail', json=payload)

        assert response.status_code == 200
        assert response.data.startswith(b'%PDF')
        assert not response.headers.get('Content-Disposition', '').startswith('attachment')

    def test_partial_document(self, client):
        response = client.post('/api/render/pdf', json={'data': {'personal': {'firstName': 'Ann'}}})
        assert response.status_code == 200
        assert 'CV.pdf' in response.headers['Content-Disposition']

    def test_unknown_template_uses_default(self, client, payload):
        payload['templateKey'] = 'no-such-layout'
        assert client.post('/api/render/pdf', json=payload).status_code == 200

    @pytest.mark.parametrize("body", [
        ['not', 'an', 'object'],
        {'data': 'text'},
        {'templateKey': 'x' * 101},
        {'settings': 'dark'},
    ])
    def test_invalid_body(self, client, body):
        response = client.post('/api/render/pdf', json=body)
        assert response.status_code == 400
        assert response.get_json()['error_code'] == 'VALIDATION_ERROR'

    def test_non_json_body(self, client):
        response = client.post('/api/render/thumbnail', data='hello', content_type='text/plain')
        assert response.status_code == 400


class TestPaginationEndpoint:
    """Page count and current page of the full-size layout"""

    def test_single_page(self, client):
        body = client.post('/api/render/pagination', json={'data': {'personal': {'firstName': 'Ann'}}}).get_json()

        assert body['totalPages'] == 1
        assert body['currentPage'] == 1
        assert body['pageHeight'] == 1123
        assert 0 < body['contentHeight'] < 1123
        assert body['templateKey'] == 'modern'

    def test_multi_page_and_scroll(self, client):
        top = client.post('/api/render/pagination', json={'templateKey': 'timeline', 'data': LONG_DATA}).get_json()
        bottom = client.post('/api/render/pagination', json={
            'templateKey': 'timeline',
            'data': LONG_DATA,
            'scrollOffset': 10 ** 6,
        }).get_json()

        assert top['totalPages'] > 1
        assert top['currentPage'] == 1
        assert bottom['currentPage'] == bottom['totalPages']

    def test_alias_reported_as_canonical_key(self, client):
        body = client.post('/api/render/pagination', json={'templateKey': 'creative'}).get_json()
        assert body['templateKey'] == 'professional_blue'

    def test_negative_scroll_rejected(self, client):
        response = client.post('/api/render/pagination', json={'scrollOffset': -5})
        assert response.status_code == 400
