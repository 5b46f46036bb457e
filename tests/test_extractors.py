from __future__ import annotations

from sources.linkedin_company import CompanyExtractor, parse_company
from sources.linkedin_profile import ProfileExtractor, parse_profile
from sources.strategies import (
    DefinitionValue,
    MatchingText,
    SelectorAttr,
    SelectorText,
    clean_text,
    first_non_empty,
    parse_html,
)
from tests.fakes import ScriptedPage, company_html, profile_html


def test_clean_text_collapses_whitespace():
    assert clean_text("  Jane \n  Doe ") == "Jane Doe"
    assert clean_text(" \n ") is None
    assert clean_text(None) is None


def test_first_non_empty_falls_back_in_order():
    soup = parse_html('<div><h1 class="x"> </h1><h2>Fallback</h2><a href="/a">A</a></div>')
    strategies = (SelectorText("h1.x"), SelectorText("h2"))
    assert first_non_empty(soup, strategies) == "Fallback"
    assert first_non_empty(soup, (SelectorText("h3"),)) is None
    assert first_non_empty(None, strategies) is None
    assert SelectorAttr("a", "href")(soup) == "/a"


def test_definition_value_and_matching_text():
    soup = parse_html("<dl><dt>Industry</dt><dd>Software</dd><dt>Company size</dt><dd>11-50 employees</dd></dl>")
    assert DefinitionValue("company size")(soup) == "11-50 employees"
    assert MatchingText("dd", r"\bemployees?\b")(soup) == "11-50 employees"
    assert DefinitionValue("Founded")(soup) is None


def test_parse_profile_reads_header_and_latest_experience():
    html = profile_html("Jane Doe", company="Acme", company_href="/company/acme/?trk=x", title="CTO")
    data = parse_profile(html)
    assert data.full_name == "Jane Doe"
    assert data.headline == "Builder of things"
    assert data.country == "Warsaw, Poland"
    assert data.latest_company_name == "Acme"
    assert data.latest_company_url == "https://www.linkedin.com/company/acme/"
    assert data.title == "CTO"


def test_parse_profile_name_fallback_and_missing_fields():
    data = parse_profile("<main><section><h1>Only Name</h1></section></main>")
    assert data.full_name == "Only Name"
    assert data.headline is None
    assert data.latest_company_name is None
    assert data.latest_company_url is None


def test_parse_profile_of_empty_page_has_empty_name():
    assert parse_profile("").full_name == ""


def test_parse_company_about_page():
    data = parse_company(company_html("Acme", "2-10 employees"))
    assert data.title == "Acme"
    assert data.description == "We make widgets."
    assert data.size_label == "2-10 employees"


def test_parse_company_title_falls_back_to_og_meta():
    html = '<html><head><meta property="og:title" content="Globex"></head><body><dl><dd>51-200 employees</dd></dl></body></html>'
    data = parse_company(html)
    assert data.title == "Globex"
    assert data.size_label == "51-200 employees"


def test_extractors_navigate_and_parse(settings):
    profile_url = "https://www.linkedin.com/in/jane"
    about_url = "https://www.linkedin.com/company/acme/about/"
    page = ScriptedPage(html={profile_url: profile_html("Jane Doe"), about_url: company_html("Acme", "11-50 employees")})

    assert ProfileExtractor(page, settings).extract_profile(profile_url).full_name == "Jane Doe"
    assert CompanyExtractor(page, settings).extract_company("https://www.linkedin.com/company/acme/").title == "Acme"
    assert page.visited() == [profile_url, about_url]
