"""Async HTTP client for the job listing, match and saved-jobs endpoints.

All calls go through one :class:`httpx.AsyncClient` so cookies issued at
sign-in are sent with every request.  Non-2xx responses become
:class:`~jobwindow.errors.ApiError` subclasses; anything that prevents a
response from being read becomes :class:`~jobwindow.errors.TransportError`.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, List, Optional
from urllib.parse import quote

import httpx

from jobwindow.config import REQUEST_TIMEOUT_SEC
from jobwindow.domain.models.core import (
    JobListing,
    JobStatusReport,
    MatchResult,
    Page,
)
from jobwindow.domain.models.query import PageQuery
from jobwindow.errors import ApiError, TransportError

LOGGER = logging.getLogger(__name__)

_UPLOAD_CONTENT_TYPES = {
    ".pdf": "application/pdf",
    ".docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    ".txt": "text/plain",
}


class ApiClient:
    """Thin JSON wrapper around a shared :class:`httpx.AsyncClient`."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = REQUEST_TIMEOUT_SEC,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout)
        self.jobs = JobsApi(self)
        self.matches = MatchApi(self)
        self.saved_jobs = SavedJobsApi(self)

    async def request(
        self,
        method: str,
        url: str,
        *,
        fallback: str = "Something went wrong",
        **kwargs: Any,
    ) -> Any:
        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            LOGGER.warning("%s %s failed: %s", method, url, exc)
            raise TransportError(str(exc) or exc.__class__.__name__) from exc

        payload: Any = None
        if response.content:
            try:
                payload = response.json()
            except ValueError as exc:
                if response.is_success:
                    raise TransportError(f"Invalid JSON from {url}") from exc

        if not response.is_success:
            LOGGER.debug("%s %s -> %d", method, url, response.status_code)
            raise ApiError.from_response(response.status_code, payload, fallback)
        return payload

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()


class JobsApi:
    def __init__(self, api: ApiClient) -> None:
        self._api = api

    async def list_jobs_cursor(self, query: PageQuery) -> Page[JobListing]:
        payload = await self._api.request("GET", "/api/jobs", params=query.to_params())
        return Page(
            items=[JobListing.from_payload(entry) for entry in payload.get("jobs") or []],
            next_cursor=payload.get("next_cursor"),
            prev_cursor=payload.get("prev_cursor"),
            total_count=payload.get("total_count"),
        )

    async def get_job(self, job_id: str) -> JobListing:
        payload = await self._api.request("GET", f"/api/jobs/{job_id}")
        return JobListing.from_payload(payload)


class MatchApi:
    def __init__(self, api: ApiClient) -> None:
        self._api = api

    async def get_results_page(self, query: PageQuery) -> Page[MatchResult]:
        """One page of the latest match results; 404 when there are none yet."""
        payload = await self._api.request(
            "GET", "/api/match/results", params=query.to_params()
        )
        return Page(
            items=[MatchResult.from_payload(entry) for entry in payload.get("matches") or []],
            next_cursor=payload.get("next_cursor"),
            prev_cursor=payload.get("prev_cursor"),
            total_count=payload.get("total_matches"),
        )

    async def upload_resume(self, path: Path) -> str:
        """Upload a resume and enqueue a match job; returns the job id."""
        content_type = _UPLOAD_CONTENT_TYPES.get(path.suffix.lower(), "application/octet-stream")
        files = {"file": (path.name, path.read_bytes(), content_type)}
        payload = await self._api.request(
            "POST", "/api/match/upload", files=files, fallback="Upload failed"
        )
        return str(payload["job_id"])

    async def get_match_job_status(self, job_id: str) -> JobStatusReport:
        payload = await self._api.request(
            "GET", f"/api/match/status/{quote(job_id, safe='')}"
        )
        return JobStatusReport.from_payload(payload)


class SavedJobsApi:
    def __init__(self, api: ApiClient) -> None:
        self._api = api

    async def add(self, job_id: str) -> None:
        await self._api.request("POST", "/api/saved-jobs", json={"job_id": job_id})

    async def remove(self, job_id: str) -> None:
        await self._api.request(
            "DELETE", f"/api/saved-jobs/{quote(job_id, safe='')}", fallback="Failed to remove"
        )

    async def list(self) -> List[JobListing]:
        payload = await self._api.request("GET", "/api/saved-jobs")
        return [JobListing.from_payload(entry) for entry in payload.get("jobs") or []]
