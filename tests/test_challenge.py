"""Tests for the ALTCHA challenge solver."""
import asyncio

from adapters.challenge import WIDGET_SELECTOR, ChallengeSolver


def test_no_widget_is_not_required(fake_page):
    page = fake_page()
    result = asyncio.run(ChallengeSolver().solve(page))

    assert result.solved is True
    assert result.detail == "not required"
    assert page.waited_for_function is False


def test_no_widget_ignores_solve_timeout(fake_page):
    page = fake_page()
    solver = ChallengeSolver(probe_timeout=5_000, solve_timeout=1)

    result = asyncio.run(solver.solve(page))

    assert result.solved is True
    assert "not required" in result.detail
    assert page.waits == []


def test_widget_already_solved(fake_page):
    page = fake_page(present=[WIDGET_SELECTOR], evaluate_results=[True])
    result = asyncio.run(ChallengeSolver().solve(page))

    assert result.solved is True
    assert page.waited_for_function is False


def test_widget_solves_within_bound(fake_page):
    page = fake_page(present=[WIDGET_SELECTOR], evaluate_results=[False], solved_in_time=True)
    result = asyncio.run(ChallengeSolver().solve(page))

    assert result.solved is True
    assert page.waited_for_function is True


def test_widget_timeout_is_failure(fake_page):
    page = fake_page(present=[WIDGET_SELECTOR], evaluate_results=[False], solved_in_time=False)
    result = asyncio.run(ChallengeSolver(solve_timeout=30_000).solve(page))

    assert result.solved is False
    assert "30 seconds" in result.detail


def test_page_error_is_failure(fake_page):
    page = fake_page(present=[WIDGET_SELECTOR], evaluate_results=[RuntimeError("page crashed")])
    result = asyncio.run(ChallengeSolver().solve(page))

    assert result.solved is False
    assert "page crashed" in result.detail
