import logging
import threading
from typing import Any

import requests
from pydantic import ValidationError

from ..config import Config
from ..errors import TransportError
from ..models import ProvisionResult, Record

logger = logging.getLogger(__name__)


class RemoteClient:
    """Bearer-token REST client for the template API.

    Methods are blocking; the sync engine calls them through ``run_sync``
    so each worker thread gets its own ``requests.Session``.
    """

    def __init__(self, config: Config):
        self.config = config
        self._thread_local = threading.local()
        self.base_url = config.base_url.rstrip("/")

    @property
    def session(self) -> requests.Session:
        """Accessor for the current thread's session."""
        return self._get_session()

    def _get_session(self) -> requests.Session:
        """Get or create a thread-local requests.Session."""
        if not hasattr(self._thread_local, "session"):
            self._thread_local.session = self._create_session()
        return self._thread_local.session

    def _create_session(self) -> requests.Session:
        session = requests.Session()
        session.headers["Authorization"] = f"Bearer {self.config.token}"
        session.headers["Accept"] = "application/json"
        return session

    def _url(self, suffix: str = "") -> str:
        return f"{self.base_url}/{suffix}"

    def _request(self, method: str, suffix: str = "", **kwargs) -> Any:
        """
        Send a request and return the decoded JSON body.

        Raises:
            TransportError: On connection failure, non-2xx status or an
                undecodable body.
        """
        url = self._url(suffix)
        logger.debug("%s %s", method, url)
        try:
            response = self._get_session().request(
                method,
                url,
                timeout=self.config.request_timeout,
                **kwargs,
            )
        except requests.RequestException as e:
            raise TransportError(f"{method} {url} failed", detail=str(e)) from e

        if not response.ok:
            try:
                detail = response.json()
            except ValueError:
                detail = response.text
            raise TransportError(
                f"{method} {url} rejected",
                status_code=response.status_code,
                detail=detail,
            )

        try:
            return response.json()
        except ValueError as e:
            raise TransportError(
                f"{method} {url} returned invalid JSON",
                status_code=response.status_code,
                detail=response.text[:200],
            ) from e

    def _to_record(self, data: Any) -> Record:
        if not isinstance(data, dict):
            raise TransportError(
                f"Unexpected template payload: {type(data).__name__}"
            )
        try:
            return Record.model_validate(data)
        except ValidationError as e:
            raise TransportError("Malformed template payload", detail=str(e)) from e

    def list_templates(self) -> list[Record]:
        """
        Fetch every template of the site (full snapshot).
        """
        data = self._request("GET")
        if not isinstance(data, list):
            raise TransportError(
                f"Unexpected listing payload: {type(data).__name__}"
            )
        return [self._to_record(item) for item in data]

    def get_template(self, record_id: int | str) -> Record:
        """
        Fetch one template by id.
        """
        return self._to_record(self._request("GET", str(record_id)))

    def update_template(
        self,
        record_id: int | str,
        code: str,
        updated_at: Any = None,
    ) -> Record:
        """
        Push new content for a template.

        Args:
            record_id: Template id.
            code: Full new content.
            updated_at: Last-known modification marker; the server uses
                it to reject updates based on a stale copy.

        Returns:
            The server's authoritative copy after the update.

        Raises:
            TransportError: If the server rejects the update or is unreachable.
        """
        data = self._request(
            "PATCH",
            str(record_id),
            json={"code": code, "updated_at": updated_at},
        )
        return self._to_record(data)

    def provision_template(self, file_path: str) -> ProvisionResult:
        """
        Ask the server to create a template for a new local file.

        Args:
            file_path: Workspace-relative path of the new file.

        Returns:
            ProvisionResult whose ``tmpl_main_id`` names the primary template.
        """
        data = self._request("POST", "cli", json={"file_path": file_path})
        if not isinstance(data, dict) or "tmpl_main_id" not in data:
            raise TransportError(
                "Provisioning response has no primary template id",
                detail=data,
            )
        return ProvisionResult.model_validate(data)
