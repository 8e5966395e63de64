"""Tests for ApiClient using httpx.MockTransport."""

import asyncio
import json

import httpx
import pytest

from jobwindow.domain.models.core import JobStatus
from jobwindow.domain.models.query import PageQuery
from jobwindow.errors import ApiError, NotFoundError, ServerError, TransportError
from jobwindow.infrastructure.api.client import ApiClient

BASE_URL = "http://testserver"


def _job_payload(index: int) -> dict:
    return {
        "id": f"job-{index}",
        "title": f"Engineer {index}",
        "company_name": "Acme",
        "skills_required": None,
        "created_at": "2024-03-01T10:00:00Z",
        "unexpected_field": "ignored",
    }


def _client(handler) -> ApiClient:
    transport = httpx.MockTransport(handler)
    return ApiClient(BASE_URL, client=httpx.AsyncClient(base_url=BASE_URL, transport=transport))


def _run(api: ApiClient, coro_factory):
    async def scenario():
        async with api:
            return await coro_factory(api)

    return asyncio.run(scenario())


class TestJobsApi:
    def test_list_jobs_sends_cursor_params(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(
                200,
                json={"jobs": [_job_payload(1), _job_payload(2)], "next_cursor": "abc", "prev_cursor": None},
            )

        query = PageQuery(limit=50).after("2024-03-01T10:00:00Z,job-0")
        page = _run(_client(handler), lambda api: api.jobs.list_jobs_cursor(query))

        assert [job.id for job in page.items] == ["job-1", "job-2"]
        assert page.items[0].skills_required == []
        assert page.next_cursor == "abc"
        assert page.prev_cursor is None
        request = seen[0]
        assert request.method == "GET"
        assert request.url.path == "/api/jobs"
        assert request.url.params["cursor"] == "2024-03-01T10:00:00Z,job-0"
        assert request.url.params["dir"] == "next"
        assert request.url.params["limit"] == "50"

    def test_first_page_omits_cursor(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={"jobs": [], "next_cursor": None})

        _run(_client(handler), lambda api: api.jobs.list_jobs_cursor(PageQuery(limit=10)))

        assert "cursor" not in seen[0].url.params

    def test_backward_query_with_domain(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={"jobs": [], "next_cursor": None, "prev_cursor": None})

        query = PageQuery().with_limit(20).in_domain("design").before("2024-03-01T10:00:00Z,job-9")
        _run(_client(handler), lambda api: api.jobs.list_jobs_cursor(query))

        params = seen[0].url.params
        assert params["dir"] == "prev"
        assert params["limit"] == "20"
        assert params["domain"] == "design"
        assert params["cursor"] == "2024-03-01T10:00:00Z,job-9"

    def test_get_job(self):
        def handler(request):
            assert request.url.path == "/api/jobs/job-5"
            return httpx.Response(200, json=_job_payload(5))

        job = _run(_client(handler), lambda api: api.jobs.get_job("job-5"))

        assert job.title == "Engineer 5"


class TestMatchApi:
    def test_results_page_maps_total(self):
        def handler(request):
            assert request.url.params["dir"] == "prev"
            return httpx.Response(
                200,
                json={
                    "matches": [
                        {
                            "job": _job_payload(1),
                            "score": 0.87,
                            "breakdown": {"skills": 0.9, "semantic": 0.8, "yoe": 1.0},
                            "explanation": {"matched_skills": ["python"], "missing_required": []},
                        }
                    ],
                    "next_cursor": "100",
                    "total_matches": 240,
                },
            )

        query = PageQuery(limit=50).before("100")
        page = _run(_client(handler), lambda api: api.matches.get_results_page(query))

        assert page.total_count == 240
        result = page.items[0]
        assert result.id == "job-1"
        assert result.score == pytest.approx(0.87)
        assert result.breakdown.semantic == pytest.approx(0.8)
        assert result.explanation.matched_skills == ["python"]

    def test_results_not_found(self):
        def handler(request):
            return httpx.Response(404, json={"detail": "No match results found"})

        with pytest.raises(NotFoundError) as excinfo:
            _run(_client(handler), lambda api: api.matches.get_results_page(PageQuery()))

        assert excinfo.value.status == 404
        assert excinfo.value.message == "No match results found"

    def test_upload_resume_is_multipart(self, tmp_path):
        resume = tmp_path / "resume.pdf"
        resume.write_bytes(b"%PDF-1.4 fake")
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(202, json={"job_id": "job-77"})

        job_id = _run(_client(handler), lambda api: api.matches.upload_resume(resume))

        assert job_id == "job-77"
        request = seen[0]
        assert request.method == "POST"
        assert request.url.path == "/api/match/upload"
        assert request.headers["content-type"].startswith("multipart/form-data")
        assert b"resume.pdf" in request.content
        assert b"application/pdf" in request.content

    def test_job_status(self):
        def handler(request):
            assert request.url.path == "/api/match/status/job-77"
            return httpx.Response(200, json={"job_id": "job-77", "status": "processing", "error": None})

        report = _run(_client(handler), lambda api: api.matches.get_match_job_status("job-77"))

        assert report.status is JobStatus.PROCESSING
        assert report.status.is_terminal is False


class TestSavedJobsApi:
    def test_add_remove_list(self):
        seen = []

        def handler(request):
            seen.append((request.method, request.url.path, request.content))
            if request.method == "GET":
                return httpx.Response(200, json={"jobs": [_job_payload(3)]})
            return httpx.Response(204)

        async def calls(api):
            await api.saved_jobs.add("job-3")
            await api.saved_jobs.remove("job-3")
            return await api.saved_jobs.list()

        jobs = _run(_client(handler), calls)

        assert [job.id for job in jobs] == ["job-3"]
        assert seen[0][0:2] == ("POST", "/api/saved-jobs")
        assert json.loads(seen[0][2]) == {"job_id": "job-3"}
        assert seen[1][0:2] == ("DELETE", "/api/saved-jobs/job-3")


class TestErrorMapping:
    def test_validation_detail_list(self):
        def handler(request):
            return httpx.Response(422, json={"detail": [{"msg": "limit must be positive"}]})

        with pytest.raises(ApiError) as excinfo:
            _run(_client(handler), lambda api: api.jobs.list_jobs_cursor(PageQuery()))

        assert type(excinfo.value) is ApiError
        assert excinfo.value.message == "limit must be positive"

    def test_server_error_without_body_uses_fallback(self):
        def handler(request):
            return httpx.Response(503)

        with pytest.raises(ServerError) as excinfo:
            _run(_client(handler), lambda api: api.jobs.list_jobs_cursor(PageQuery()))

        assert excinfo.value.message == "Something went wrong"

    def test_network_failure_is_transport_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(TransportError):
            _run(_client(handler), lambda api: api.jobs.list_jobs_cursor(PageQuery()))

    def test_invalid_json_is_transport_error(self):
        def handler(request):
            return httpx.Response(200, content=b"<html>oops</html>")

        with pytest.raises(TransportError):
            _run(_client(handler), lambda api: api.jobs.list_jobs_cursor(PageQuery()))
