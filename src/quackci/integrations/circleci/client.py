"""
quackci.integrations.circleci.client - HTTP Client for the CI Service
=======================================================================

requests-based implementation of BaseCIClient.

Endpoints consumed (relative to HttpConfig.api_base_url):
    POST v2/project/{short_vcs}/{org}/{repo}/pipeline      {branch} → {id, number}
    GET  v2/pipeline/{id}/workflow                         → {items: [...]}
    GET  v2/workflow/{id}                                  → {status, ...}
    GET  v2/workflow/{id}/job                              → {items: [...]}
    GET  v2/project/{vcs}/{org}/{repo}/{n}/artifacts       → {items: [...]}
    GET  v1.1/project/{vcs}/{org}/{repo}/{n}?circle-token= → {steps: [...] | null}
    GET  {output_url}                                      → [{time, message}, ...]

Authentication:
    v2 endpoints take the token in the Circle-Token header. The legacy v1.1
    endpoint takes it as the circle-token query parameter. Action output URLs
    are pre-signed and are fetched without the header.
"""

from __future__ import annotations

from typing import Any, Optional

import requests
import structlog

from quackci.core.config import HttpConfig
from quackci.core.exceptions import CIClientError
from quackci.integrations.circleci.base import ApiResponse, BaseCIClient


logger = structlog.get_logger()


# The v2 trigger endpoint uses the short VCS slug; everything else accepts the
# long form.
SHORT_VCS = {
    "github": "gh",
    "bitbucket": "bb",
}


class CircleCIClient(BaseCIClient):
    """CI client talking to the real REST API over HTTPS.

    Args:
        org: CI organization name.
        repo: Repository name (without owner).
        token: API token.
        vcs: VCS segment of the project slug.
        http: Endpoint and timeout settings.
        session: Optional pre-built session (tests inject a mock here).
    """

    def __init__(
        self,
        org: str,
        repo: str,
        token: str,
        vcs: str = "github",
        http: Optional[HttpConfig] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self._org = org
        self._repo = repo
        self._token = token
        self._vcs = vcs
        self._http = http or HttpConfig()
        self._api = self._http.api_base_url.rstrip("/")

        self._session = session or requests.Session()
        self._session.headers.update({
            "Circle-Token": token,
            "Accept": "application/json",
        })
        self._logger = logger.bind(component="circleci_client")

    # =========================================================================
    # Endpoint Builders
    # =========================================================================

    @property
    def trigger_url(self) -> str:
        short_vcs = SHORT_VCS.get(self._vcs, self._vcs)
        return f"{self._api}/v2/project/{short_vcs}/{self._org}/{self._repo}/pipeline"

    def _project_url(self, version: str, build_number: int) -> str:
        return f"{self._api}/{version}/project/{self._vcs}/{self._org}/{self._repo}/{build_number}"

    # =========================================================================
    # BaseCIClient
    # =========================================================================

    def trigger_pipeline(self, branch: str) -> ApiResponse:
        url = self.trigger_url
        try:
            r = self._session.post(
                url,
                json={"branch": branch},
                timeout=self._http.timeout_seconds,
            )
        except requests.RequestException as e:
            raise CIClientError(
                message=f"CI POST {url} failed: {self._redact(e)}",
                url=url,
                error_code="TRANSPORT_ERROR",
            ) from None

        try:
            body = r.json()
        except ValueError:
            body = None
        return ApiResponse(status_code=r.status_code, body=body, text=r.text)

    def list_pipeline_workflows(self, pipeline_id: str) -> list[dict[str, Any]]:
        return self._get_items(f"{self._api}/v2/pipeline/{pipeline_id}/workflow")

    def get_workflow(self, workflow_id: str) -> dict[str, Any]:
        url = f"{self._api}/v2/workflow/{workflow_id}"
        data = self._get(url)
        if not isinstance(data, dict):
            raise CIClientError(
                message=f"CI GET {url} returned {type(data).__name__}, expected an object",
                url=url,
                error_code="INVALID_JSON",
            )
        return data

    def list_workflow_jobs(self, workflow_id: str) -> list[dict[str, Any]]:
        return self._get_items(f"{self._api}/v2/workflow/{workflow_id}/job")

    def list_job_artifacts(self, build_number: int) -> list[dict[str, Any]]:
        return self._get_items(f"{self._project_url('v2', build_number)}/artifacts")

    def get_job_details(self, build_number: int) -> dict[str, Any]:
        return self._get(
            self._project_url("v1.1", build_number),
            params={"circle-token": self._token},
        )

    def get_action_output(self, output_url: str) -> Any:
        # Pre-signed URL: a None header value drops the session's token.
        return self._get(output_url, headers={"Circle-Token": None})

    def close(self) -> None:
        self._session.close()

    # =========================================================================
    # Internal Helpers
    # =========================================================================

    def _get(
        self,
        url: str,
        params: Optional[dict[str, Any]] = None,
        headers: Optional[dict[str, Any]] = None,
    ) -> Any:
        """GET ``url`` and decode the JSON body.

        ``url`` in raised errors never includes query parameters, and the
        token is masked in messages, so the legacy token does not reach logs.
        """
        try:
            r = self._session.get(
                url,
                params=params,
                headers=headers,
                timeout=self._http.timeout_seconds,
            )
        except requests.RequestException as e:
            raise CIClientError(
                message=f"CI GET {url} failed: {self._redact(e)}",
                url=url,
                error_code="TRANSPORT_ERROR",
            ) from None

        if r.status_code >= 400:
            raise CIClientError(
                message=f"CI GET {url} -> {r.status_code} {self._redact(r.text)}",
                url=url,
                status_code=r.status_code,
                error_code="HTTP_ERROR",
            )

        try:
            return r.json()
        except ValueError as e:
            raise CIClientError(
                message=f"CI GET {url} returned a non-JSON body",
                url=url,
                status_code=r.status_code,
                error_code="INVALID_JSON",
            ) from e

    def _redact(self, text: Any) -> str:
        """Mask the API token wherever it appears in ``text``."""
        text = str(text)
        if self._token:
            text = text.replace(self._token, "***")
        return text

    def _get_items(self, url: str) -> list[dict[str, Any]]:
        """Collect ``items`` across every page of a v2 list endpoint."""
        items: list[dict[str, Any]] = []
        page_token: Optional[str] = None
        while True:
            params = {"page-token": page_token} if page_token else None
            data = self._get(url, params=params)
            if not isinstance(data, dict):
                raise CIClientError(
                    message=f"CI GET {url} returned {type(data).__name__}, expected an object",
                    url=url,
                    error_code="INVALID_JSON",
                )
            items.extend(data.get("items") or [])
            page_token = data.get("next_page_token")
            if not page_token:
                return items
            self._logger.debug("fetching_next_page", url=url)
