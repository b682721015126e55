"""
Collaborator API client - documents, template catalog, export and checkout

Reads are retried with backoff on connection errors and timeouts. Creates
and updates are never retried here: a failed save stays dirty and the next
edit (or a manual save) re-attempts it.
"""
import logging
from typing import Any, Dict, List, NamedTuple, Optional

import requests

from cvstudio.config import CV_API_BASE_URL, CV_API_TIMEOUT, CV_API_TOKEN
from cvstudio.models.catalog import Entitlement, Template
from cvstudio.utils.exceptions import (
    AuthenticationError,
    EntitlementExpiredError,
    ExternalAPIError,
    NotFoundError,
    PaymentRequiredError,
    RateLimitError,
)
from cvstudio.utils.retry import retry_with_backoff

logger = logging.getLogger(__name__)

SERVICE_NAME = "CV API"

CHECKOUT_PATHS = {
    'stripe': '/payment/stripe/create-session',
    'paypal': '/payment/paypal/create-order',
}


class ExportArtifact(NamedTuple):
    content: bytes
    content_type: str

    @property
    def is_pdf(self) -> bool:
        return self.content_type.split(';')[0].strip().lower() == 'application/pdf'


def error_message(response: requests.Response, fallback: str) -> str:
    """Pull {msg|message|error} out of a JSON error body, else use the body text"""
    try:
        body = response.json()
    except ValueError:
        return (response.text or '').strip() or fallback
    if isinstance(body, dict):
        return body.get('msg') or body.get('message') or body.get('error') or fallback
    return fallback


class CVApiClient:
    """
    Thin requests.Session wrapper over the CV backend.

    Args:
        base_url: API root, e.g. http://localhost:5000/api
        token: Bearer token of the signed-in user
        timeout: Per-request timeout in seconds
        session: Optional pre-configured requests.Session
    """

    def __init__(self, base_url: str = CV_API_BASE_URL, token: Optional[str] = CV_API_TOKEN,
                 timeout: float = CV_API_TIMEOUT, session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({'Accept': 'application/json'})
        if token:
            self.session.headers['Authorization'] = f"Bearer {token}"

    # ----------------------------------------
    # Transport
    # ----------------------------------------

    def _url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def _send(self, method: str, path: str, **kwargs) -> requests.Response:
        return self.session.request(method, self._url(path), timeout=self.timeout, **kwargs)

    @retry_with_backoff(max_retries=2, initial_delay=0.5, max_delay=5.0)
    def _send_idempotent(self, method: str, path: str, **kwargs) -> requests.Response:
        return self._send(method, path, **kwargs)

    def _request(self, method: str, path: str, retry: bool = False, resource: str = "Resource",
                 **kwargs) -> requests.Response:
        send = self._send_idempotent if retry else self._send
        try:
            response = send(method, path, **kwargs)
        except requests.exceptions.Timeout:
            logger.warning("api.request.timeout", extra={"method": method, "path": path})
            raise ExternalAPIError(SERVICE_NAME, "The CV service did not respond in time")
        except requests.exceptions.RequestException as e:
            logger.warning("api.request.failed", extra={"method": method, "path": path, "error": str(e)})
            raise ExternalAPIError(SERVICE_NAME, details={'error': str(e)})

        self._raise_for_status(response, resource)
        return response

    def _raise_for_status(self, response: requests.Response, resource: str):
        status = response.status_code
        if status < 400:
            return
        if status == 401:
            raise AuthenticationError(error_message(response, "Not authorized"))
        if status == 402:
            raise PaymentRequiredError(error_message(response, "Payment required for this template"))
        if status == 403:
            raise EntitlementExpiredError(error_message(response, "Access to this template has expired"))
        if status == 404:
            raise NotFoundError(resource)
        if status == 429:
            retry_after = response.headers.get('Retry-After')
            raise RateLimitError(retry_after=int(retry_after) if retry_after and retry_after.isdigit() else None)
        raise ExternalAPIError(SERVICE_NAME, error_message(response, f"CV service error ({status})"),
                               details={'status_code': status})

    @staticmethod
    def _json(response: requests.Response) -> Any:
        try:
            return response.json()
        except ValueError:
            raise ExternalAPIError(SERVICE_NAME, "Invalid JSON in CV service response")

    # ----------------------------------------
    # Catalog and documents
    # ----------------------------------------

    def fetch_templates(self) -> List[Template]:
        response = self._request('GET', '/cv/templates', retry=True, resource="Template catalog")
        body = self._json(response) or []
        return [Template.model_validate(t) for t in body if isinstance(t, dict) and t.get('key')]

    def fetch_document(self, cv_id: str) -> Dict[str, Any]:
        response = self._request('GET', f'/cv/{cv_id}', retry=True, resource="CV")
        return self._json(response)

    def create_document(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        response = self._request('POST', '/cv', json=payload, resource="CV")
        record = self._json(response) or {}
        logger.info("api.document.created", extra={"cv_id": record.get('_id')})
        return record

    def update_document(self, cv_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        response = self._request('PUT', f'/cv/{cv_id}', json=payload, resource="CV")
        return self._json(response) if response.content else {}

    def delete_document(self, cv_id: str) -> None:
        self._request('DELETE', f'/cv/{cv_id}', resource="CV")
        logger.info("api.document.deleted", extra={"cv_id": cv_id})

    # ----------------------------------------
    # Export and payment
    # ----------------------------------------

    def export_document(self, cv_id: str) -> ExportArtifact:
        """
        Request the rendered PDF.

        The body is returned as-is together with its content type; callers
        must check ExportArtifact.is_pdf before writing it anywhere.
        """
        response = self._request('GET', f'/cv/export/{cv_id}', resource="CV",
                                 headers={'Accept': 'application/pdf, application/json'})
        content_type = response.headers.get('Content-Type', '')
        return ExportArtifact(response.content, content_type)

    def create_checkout_session(self, cv_id: str, template_id: str, provider: str = 'stripe') -> Dict[str, Any]:
        """Start a checkout for a (document, template) pair; returns {id, url}"""
        path = CHECKOUT_PATHS.get(provider)
        if not path:
            raise ExternalAPIError(SERVICE_NAME, f"Unsupported payment provider '{provider}'")
        response = self._request('POST', path, json={'cvId': cv_id, 'templateId': template_id},
                                 resource="Template")
        session = self._json(response) or {}
        logger.info("api.checkout.created", extra={
            "cv_id": cv_id,
            "template_id": template_id,
            "provider": provider,
        })
        return session

    def fetch_entitlement(self) -> Entitlement:
        """The signed-in user's global window and purchases; guests get an empty entitlement"""
        response = self._request('GET', '/auth/me', retry=True, resource="User")
        return Entitlement.model_validate(self._json(response) or {})
