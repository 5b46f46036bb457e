from __future__ import annotations

import pytest

from db.repos.companies_repo import CompaniesRepo
from db.repos.experiences_repo import ExperiencesRepo
from db.repos.people_repo import PeopleRepo
from models.company_record import CompanySize
from pipelines.runner import Candidate, Pipeline, RunContext, process_item
from pipelines.steps import (
    DiscoverAndReconcilePeople,
    DiscoverPeople,
    ExtractAndReconcilePeople,
    LoadPendingCompanies,
    RefreshCompanyProfiles,
)
from sources.linkedin_search import NEXT_PAGE
from tests.fakes import ScriptedPage, company_html, profile_html
from utils.exceptions import AuthenticationError, ExtractionSkip



JANE = "https://www.linkedin.com/in/jane"
JOHN = "https://www.linkedin.com/in/john"
NOBODY = "https://www.linkedin.com/in/nobody"


def test_process_item_records_success_skip_and_failure():
    ctx = RunContext()

    def _skip():
        raise ExtractionSkip("k2", "empty full name")

    def _fail():
        raise ValueError("boom")

    process_item(ctx, "t", "k1", lambda: "ok")
    process_item(ctx, "t", "k2", _skip)
    process_item(ctx, "t", "k3", _fail)
    assert [r.status for r in ctx.results] == ["success", "skip", "failure"]
    assert ctx.results[1].detail == "empty full name"
    assert ctx.results[2].error == "ValueError: boom"


def test_process_item_propagates_fatal_errors():
    def _fatal():
        raise AuthenticationError("login failed")

    with pytest.raises(AuthenticationError):
        process_item(RunContext(), "t", "k", _fatal)


def test_discover_people_dedupes_across_searches_first_search_wins(settings):
    page = ScriptedPage(result_pages=[[JANE, JOHN]])
    step = DiscoverPeople(page, settings, roles=["CTO", "Founder"], countries=["Poland"], max_pages=1)
    ctx = step.run(RunContext())

    # every search replays the same scripted result page
    assert ctx.candidates == [Candidate(JANE, "CTO", "Poland"), Candidate(JOHN, "CTO", "Poland")]
    assert ctx.meta["candidates_total"] == 2
    assert [r.key for r in ctx.results] == ["search:CTO/Poland", "search:Founder/Poland"]


def test_extract_and_reconcile_people_records_skip_and_failure(conn, settings):
    page = ScriptedPage(
        html={
            JANE: profile_html("Jane Doe", company="Acme", company_href="/company/acme/", title="CTO"),
            NOBODY: "<html><body></body></html>",
        },
        failing_urls={JOHN},
    )
    ctx = RunContext(candidates=[Candidate(JANE, "CTO", "Poland"), Candidate(NOBODY), Candidate(JOHN)])
    ctx = ExtractAndReconcilePeople(page, conn, settings).run(ctx)

    assert [r.status for r in ctx.results] == ["success", "skip", "failure"]
    assert ctx.meta["processed_people"] == 1
    person = PeopleRepo(conn).get_by_profile_url(JANE)
    assert person.searching_role == "CTO"
    assert PeopleRepo(conn).get_by_profile_url(NOBODY) is None
    experiences = ExperiencesRepo(conn).list_for_person(person.id)
    assert [e.company_name for e in experiences] == ["Acme"]


def test_fused_discovery_reconciles_each_page_before_advancing(conn, settings):
    search_page = ScriptedPage(
        visible={NEXT_PAGE[0]}, result_pages=[[JANE], [JOHN]], advance_on=NEXT_PAGE,
    )
    detail_page = ScriptedPage(html={JANE: profile_html("Jane Doe"), JOHN: profile_html("John Roe")})
    step = DiscoverAndReconcilePeople(
        search_page, detail_page, conn, settings, roles=["CTO"], countries=["Poland"], max_pages=2,
    )
    ctx = step.run(RunContext())

    assert detail_page.visited() == [JANE, JOHN]
    assert ctx.meta["processed_people"] == 2
    assert ctx.meta["candidates_total"] == 2
    assert PeopleRepo(conn).get_by_profile_url(JOHN).full_name == "John Roe"


def test_refresh_company_profiles(conn, settings):
    repo = CompaniesRepo(conn)
    acme = repo.upsert_company("Acme", "https://www.linkedin.com/company/acme/").company_id
    broken = repo.upsert_company("Broken", "https://www.linkedin.com/company/broken/").company_id
    repo.upsert_company("No Url")
    page = ScriptedPage(
        html={"https://www.linkedin.com/company/acme/about/": company_html("Acme Inc", "2-10 employees")},
        failing_urls={"https://www.linkedin.com/company/broken/about/"},
    )
    progress = []

    ctx = Pipeline([
        LoadPendingCompanies(conn, limit=10),
        RefreshCompanyProfiles(page, conn, settings, on_progress=lambda *a: progress.append(a)),
    ]).run(RunContext())

    assert ctx.meta["pending_companies_total"] == 2
    assert ctx.meta["companies_refreshed"] == 1
    assert ctx.counts() == {"success": 1, "skip": 0, "failure": 1}
    assert [p[0] for p in progress] == [1, 2]

    refreshed = repo.get(acme)
    assert refreshed.name == "Acme Inc"
    assert refreshed.size == CompanySize.RANGE_1_10
    assert refreshed.size_label == "2-10 employees"
    assert repo.get(broken).size == CompanySize.UNKNOWN


def test_refresh_keeps_existing_name_when_title_missing(conn, settings):
    repo = CompaniesRepo(conn)
    cid = repo.upsert_company("Acme", "https://www.linkedin.com/company/acme/").company_id
    page = ScriptedPage(html={"https://www.linkedin.com/company/acme/about/": "<dl><dd>Some people</dd></dl>"})
    ctx = RunContext(companies=[repo.get(cid)])
    RefreshCompanyProfiles(page, conn, settings).run(ctx)

    company = repo.get(cid)
    assert company.name == "Acme"
    assert company.size == CompanySize.UNKNOWN
