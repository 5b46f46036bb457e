from __future__ import annotations

from contextlib import contextmanager
from types import SimpleNamespace

import pytest

from db.connection import open_store
from db.repos.companies_repo import CompaniesRepo
from models.company_record import CompanySize
from services.session_guard import LOGIN_EMAIL, LOGIN_PASSWORD, LOGIN_SUBMIT
from tests.fakes import ScriptedPage, company_html


@pytest.fixture
def cli_env(monkeypatch, tmp_path):
    for name in ("DATABASE_URL", "LINKEDIN_EMAIL", "LINKEDIN_PASSWORD", "COOKIES_JSON", "REUSE_BROWSER_PROFILE"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("ACTION_DELAY_MS", "0")
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'cli.db'}")
    monkeypatch.setenv("COOKIES_JSON", "[]")
    return monkeypatch


def _patch_browser(monkeypatch, page):
    import cli

    @contextmanager
    def _session(settings):
        yield SimpleNamespace(page=page, open_page=lambda: page)

    monkeypatch.setattr(cli, "browser_session", _session)


def _exit_code(argv):
    import cli

    with pytest.raises(SystemExit) as excinfo:
        cli.main(argv)
    return excinfo.value.code


def test_missing_job_selector_is_usage_error(cli_env):
    assert _exit_code([]) == 2


def test_unknown_job_selector_is_usage_error(cli_env):
    assert _exit_code(["scrape-everything"]) == 2


def test_missing_database_url_exits_1(cli_env):
    cli_env.delenv("DATABASE_URL")
    _patch_browser(cli_env, ScriptedPage())
    assert _exit_code(["refresh-companies"]) == 1


def test_no_session_source_exits_1_before_browser(cli_env):
    import cli

    cli_env.delenv("COOKIES_JSON")

    @contextmanager
    def _unreachable(settings):
        raise AssertionError("browser must not be launched")
        yield

    cli_env.setattr(cli, "browser_session", _unreachable)
    assert _exit_code(["run-outreach"]) == 1


def test_failed_login_exits_1(cli_env):
    cli_env.setenv("LINKEDIN_EMAIL", "me@example.com")
    cli_env.setenv("LINKEDIN_PASSWORD", "wrong")
    _patch_browser(cli_env, ScriptedPage(visible={LOGIN_EMAIL[0], LOGIN_PASSWORD[0], LOGIN_SUBMIT[0]}))
    assert _exit_code(["discover-people", "--role", "CTO", "--country", "Poland"]) == 1


def test_refresh_companies_end_to_end(cli_env, tmp_path, capsys):
    import cli

    db_url = f"sqlite:///{tmp_path / 'other.db'}"
    with open_store(db_url) as conn:
        cid = CompaniesRepo(conn).upsert_company("Acme", "https://www.linkedin.com/company/acme/").company_id

    page = ScriptedPage(html={"https://www.linkedin.com/company/acme/about/": company_html("Acme", "11-50 employees")})
    _patch_browser(cli_env, page)
    cli.main(["--db", db_url, "refresh-companies", "--limit", "5"])

    with open_store(db_url) as conn:
        assert CompaniesRepo(conn).get(cid).size == CompanySize.RANGE_11_50
    out = capsys.readouterr().out
    assert "REFRESH-COMPANIES SUMMARY" in out
    assert "Succeeded: 1" in out


def test_check_browser_runs_without_database_or_session(monkeypatch, tmp_path, capsys):
    import cli
    from services.chrome_locator import ChromeReport

    for name in ("DATABASE_URL", "COOKIES_JSON", "LINKEDIN_EMAIL", "REUSE_BROWSER_PROFILE"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(cli, "inspect_chrome", lambda: ChromeReport(executable=None, user_data_dir=tmp_path))

    cli.main(["check-browser"])

    out = capsys.readouterr().out
    assert "Chrome executable: NOT FOUND" in out
    assert f"User data directory: {tmp_path}" in out
    assert "REUSE_BROWSER_PROFILE" not in out
