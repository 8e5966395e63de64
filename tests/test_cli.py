from pathlib import Path

import httpx
from typer.testing import CliRunner

from jobwindow import cli
from jobwindow.appctx import AppContext, _create_settings_manager
from jobwindow.infrastructure.api.client import ApiClient

runner = CliRunner()


def _jobs_handler(request: httpx.Request) -> httpx.Response:
    if request.url.path == "/api/jobs":
        jobs = [
            {"id": f"job-{i}", "title": f"Role {i}", "company_name": "Acme", "location": "Remote"}
            for i in range(3)
        ]
        return httpx.Response(200, json={"jobs": jobs, "next_cursor": None})
    return httpx.Response(404, json={"detail": "Job not found"})


def _patch_context(monkeypatch, tmp_path: Path, handler) -> None:
    def factory(_ctx):
        client = httpx.AsyncClient(base_url="http://testserver", transport=httpx.MockTransport(handler))
        return AppContext(
            settings=_create_settings_manager(tmp_path / "settings.json"),
            api=ApiClient("http://testserver", client=client),
        )

    monkeypatch.setattr(cli, "_context", factory)


def test_browse_prints_jobs(monkeypatch, tmp_path):
    _patch_context(monkeypatch, tmp_path, _jobs_handler)

    result = runner.invoke(cli.app, ["browse"])

    assert result.exit_code == 0, result.output
    assert "Role 0" in result.output
    assert "Role 2" in result.output
    assert "reached the end" in result.output


def test_status_not_found_exits_with_error(monkeypatch, tmp_path):
    def handler(request):
        return httpx.Response(404, json={"detail": "Job not found"})

    _patch_context(monkeypatch, tmp_path, handler)

    result = runner.invoke(cli.app, ["status", "job-404"])

    assert result.exit_code == 1
    assert "Job not found" in result.output


def test_match_rejects_unsupported_file(monkeypatch, tmp_path):
    _patch_context(monkeypatch, tmp_path, _jobs_handler)
    resume = tmp_path / "resume.png"
    resume.write_bytes(b"img")

    result = runner.invoke(cli.app, ["match", str(resume)])

    assert result.exit_code == 1
    assert "Please upload a PDF, DOCX, or TXT file" in result.output
