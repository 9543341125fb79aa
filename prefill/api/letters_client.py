"""Letters API client."""
import logging
from typing import Optional, Dict, Any, List

import requests

from config import LettersApiConfig
from prefill.api.credentials import CredentialProvider, StaticCredentials, resolve_api_key
from prefill.schema.models import BulkLetterRequest, LetterTemplate

logger = logging.getLogger(__name__)

RATE_LIMIT_MESSAGE = "Rate limit exceeded. Please wait a moment before trying again."


class LettersApiError(Exception):
    """A Letters API call failed."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        errors: Optional[List[Dict[str, Any]]] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.errors = errors or []
        super().__init__(message)

    def __str__(self) -> str:
        lines = [self.message]
        for err in self.errors:
            prefix = f"Item {err['id']}: " if err.get("id") is not None else ""
            error_type = f"({err['errorType']}) " if err.get("errorType") else ""
            lines.append(f"{prefix}{error_type}{err.get('message', '')}")
        return "\n".join(lines)


class LettersClient:
    """Client for the Letters API."""

    def __init__(
        self,
        config: LettersApiConfig,
        credentials: Optional[CredentialProvider] = None,
    ):
        """
        Initialize client.

        Args:
            config: API settings
            credentials: Callable returning the API key; defaults to config.api_key
        """
        self.config = config
        self.credentials = credentials or StaticCredentials(config.api_key)
        self.session = requests.Session()
        self.session.headers.update({"Content-Type": "application/json"})

    def _request(self, method: str, path: str, **kwargs) -> Any:
        """Send an authorized request and return the decoded JSON body."""
        api_key = resolve_api_key(self.credentials)
        url = f"{self.config.base_url.rstrip('/')}{path}"

        try:
            response = self.session.request(
                method,
                url,
                headers={"Authorization": f"Bearer {api_key}"},
                timeout=self.config.timeout,
                **kwargs,
            )
        except requests.Timeout as e:
            logger.error(f"{method} {path} timed out: {e}")
            raise LettersApiError("Request timed out. Please try again.") from e
        except requests.RequestException as e:
            logger.error(f"{method} {path} failed: {e}")
            raise LettersApiError(f"Request failed: {e}") from e

        if response.status_code == 429:
            logger.error(f"{method} {path}: rate limited")
            raise LettersApiError(RATE_LIMIT_MESSAGE, 429)

        try:
            data = response.json()
        except ValueError:
            data = None

        if not response.ok:
            body = data if isinstance(data, dict) else {}
            errors = body.get("errors")
            logger.error(f"{method} {path} returned {response.status_code}")
            raise LettersApiError(
                body.get("message") or f"Request failed with status {response.status_code}",
                response.status_code,
                errors if isinstance(errors, list) else None,
            )

        if data is None:
            raise LettersApiError("Invalid JSON in API response", response.status_code)

        return data

    def list_templates(
        self,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> List[LetterTemplate]:
        """List templates available to the API key."""
        params = {}
        if limit:
            params["limit"] = limit
        if offset:
            params["offset"] = offset

        data = self._request("GET", "/templates", params=params or None)
        templates = []
        for raw in data.get("templates", []) if isinstance(data, dict) else []:
            templates.append(
                LetterTemplate(
                    id=raw.get("templateId"),
                    name=raw.get("name", ""),
                    fields=LetterTemplate.parse_fields(raw.get("fields")),
                )
            )
        return templates

    def get_template(self, template_id: int) -> LetterTemplate:
        """Fetch one template and its fields."""
        data = self._request("GET", f"/templates/{template_id}")
        template = LetterTemplate(
            id=data.get("templateId", template_id),
            name=data.get("name", ""),
            fields=LetterTemplate.parse_fields(data.get("fields")),
        )
        logger.info(f"Template {template_id} loaded with {len(template.fields)} fields")
        return template

    def create_bulk(self, request: BulkLetterRequest) -> str:
        """Submit a bulk letter request and return its batch id."""
        data = self._request("POST", "/letters/bulks", json=request.to_dict())
        batch_id = data.get("batchId")
        if not batch_id:
            raise LettersApiError("API response did not include a batch id")

        logger.info(f"Batch {batch_id}: {len(request.letters)} letters submitted")
        return batch_id

    def create_letter(self, template_id: int, params: Dict[str, str]) -> Dict[str, Any]:
        """Create a single letter."""
        return self._request(
            "POST",
            "/letters",
            json={"templateId": template_id, "letterParams": params},
        )

    def preview_letter(self, template_id: int, params: Dict[str, str]) -> str:
        """Render a letter without notifying anyone; returns its HTML."""
        data = self.create_letter(template_id, params)
        html = data.get("issuedLetter")
        if not html:
            raise LettersApiError("Could not retrieve preview HTML from the API.")
        return html

    def get_letter(self, public_id: str) -> Dict[str, Any]:
        return self._request("GET", f"/letters/{public_id}")

    def get_letter_pdf(self, public_id: str) -> Dict[str, Any]:
        """Get the PDF download link of a letter."""
        return self._request("GET", f"/letters/{public_id}/pdfs")

    def get_batch(self, batch_id: str) -> Dict[str, Any]:
        """Get bulk batch status."""
        return self._request("GET", f"/batches/{batch_id}")
