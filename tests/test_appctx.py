import asyncio
from pathlib import Path

from jobwindow.appctx import AppContext, _create_settings_manager
from jobwindow.application.services.window_controller import SKIP_JOB_IN_FLIGHT
from jobwindow.gui.viewmodels.match_results_viewmodel import MatchResultsViewModel
from jobwindow.gui.viewmodels.windowed_list_viewmodel import WindowedListViewModel


def _context(tmp_path: Path) -> AppContext:
    return AppContext(settings=_create_settings_manager(tmp_path / "settings.json"))


def test_windows_get_their_own_cache(tmp_path):
    context = _context(tmp_path)

    first = context.jobs_window()
    second = context.jobs_window()

    assert first is not second
    assert first.cache is not second.cache
    assert first.config is context.window_config


def test_matches_window_honours_session_job(tmp_path):
    context = _context(tmp_path)
    controller = context.matches_window()
    context.session.begin_job("job-1")

    outcome = asyncio.run(controller.initial_load())

    assert outcome.skipped_reason == SKIP_JOB_IN_FLIGHT


def test_view_models_share_the_session(tmp_path):
    context = _context(tmp_path)

    jobs = context.jobs_view_model()
    matches = context.match_view_model()
    context.session.begin_job("job-3")

    assert isinstance(jobs, WindowedListViewModel)
    assert isinstance(matches, MatchResultsViewModel)
    assert matches.job_in_progress.value is True


def test_sign_out_clears_session(tmp_path):
    context = _context(tmp_path)
    context.session.begin_job("job-1")
    context.session.total_matches.value = 5

    context.sign_out()

    assert context.session.current_job_id.value is None
    assert context.session.total_matches.value is None
