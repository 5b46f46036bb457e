import argparse
import dataclasses
import logging
import os
import sys
import uuid as _uuid

from config.settings import Settings, load_settings
from db.connection import open_store
from db.repos.people_repo import PeopleRepo
from pipelines.runner import Pipeline, RunContext
from pipelines.steps import (
    DiscoverAndReconcilePeople,
    DiscoverPeople,
    EnsureSession,
    ExtractAndReconcilePeople,
    LoadOutreachCandidates,
    LoadPendingCompanies,
    RefreshCompanyProfiles,
    SendConnectionRequests,
)
from services.browser import browser_session
from services.chrome_locator import inspect_chrome
from services.outreach import OutreachEngine
from services.reporting import print_summary
from utils.exceptions import AuthenticationError, ConfigurationError
from utils.logging_setup import init_logging


logger = logging.getLogger("cli")


def cmd_discover_people(args, settings: Settings) -> RunContext:
    fused = args.fused or settings.fused_discovery
    with open_store(settings.database_url) as conn, browser_session(settings) as session:
        steps = [EnsureSession(session.page, settings)]
        if fused:
            steps.append(DiscoverAndReconcilePeople(
                session.page, session.open_page(), conn, settings,
                roles=args.role, countries=args.country, max_pages=args.max_pages,
            ))
        else:
            steps.extend([
                DiscoverPeople(session.page, settings, roles=args.role, countries=args.country, max_pages=args.max_pages),
                ExtractAndReconcilePeople(session.page, conn, settings),
            ])
        return Pipeline(steps).run(RunContext())


def cmd_refresh_companies(args, settings: Settings) -> RunContext:
    def _progress(cur, total, company_id, name):
        print(f"[{cur}/{total}] Refreshing company_id={company_id} name={name}")

    with open_store(settings.database_url) as conn, browser_session(settings) as session:
        pipeline = Pipeline([
            EnsureSession(session.page, settings),
            LoadPendingCompanies(conn, limit=settings.company_refresh_limit),
            RefreshCompanyProfiles(session.page, conn, settings, on_progress=_progress if args.progress else None),
        ])
        return pipeline.run(RunContext())


def cmd_run_outreach(args, settings: Settings) -> RunContext:
    with open_store(settings.database_url) as conn, browser_session(settings) as session:
        engine = OutreachEngine(session.page, PeopleRepo(conn), settings)
        pipeline = Pipeline([
            EnsureSession(session.page, settings),
            LoadOutreachCandidates(engine),
            SendConnectionRequests(engine),
        ])
        return pipeline.run(RunContext())


def cmd_check_browser(args) -> None:
    report = inspect_chrome()
    print("Chrome Configuration Check")
    print("=" * 26)
    for line in report.lines():
        print(line)
    if report.executable and report.user_data_exists:
        print("Reuse it with REUSE_BROWSER_PROFILE=true BROWSER_PROFILE_DIR=system BROWSER_CHANNEL=chrome")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="LinkedIn discovery and outreach CLI")
    parser.add_argument("--db", default=None, help="SQLite database URL or path (default: DATABASE_URL)")
    parser.add_argument("--headful", action="store_true", help="Show the browser window")
    sub = parser.add_subparsers(dest="cmd", required=True)

    p_disc = sub.add_parser("discover-people", help="Search people by role and country and store their profiles")
    p_disc.add_argument("--role", action="append", help="Role to search (repeatable). Default: SEARCH_ROLES")
    p_disc.add_argument("--country", action="append", help="Country to search (repeatable). Default: SEARCH_COUNTRIES")
    p_disc.add_argument("--max-pages", type=int, default=None, help="Result pages per search (default: MAX_PAGES)")
    p_disc.add_argument("--fused", action="store_true", help="Extract each result page before paging on")
    p_disc.set_defaults(func=cmd_discover_people)

    p_ref = sub.add_parser("refresh-companies", help="Fetch size and description of companies with unknown size")
    p_ref.add_argument("--limit", type=int, default=None, help="Max companies to refresh (default: COMPANY_REFRESH_LIMIT)")
    p_ref.add_argument("--progress", action="store_true", help="Print progress for each company")
    p_ref.set_defaults(func=cmd_refresh_companies)

    p_out = sub.add_parser("run-outreach", help="Send connection requests to people at companies in the size band")
    p_out.add_argument("--limit", type=int, default=None, help="Max connection requests (default: OUTREACH_LIMIT)")
    p_out.set_defaults(func=cmd_run_outreach)

    p_chk = sub.add_parser("check-browser", help="Locate an installed Chrome and its user data directory")
    p_chk.set_defaults(func=cmd_check_browser, standalone=True)
    return parser


def _settings_for(args) -> Settings:
    settings = load_settings(database_url=args.db)
    overrides = {}
    if args.headful:
        overrides["headless"] = False
    limit = getattr(args, "limit", None)
    if limit is not None:
        if limit < 1:
            raise ConfigurationError(f"--limit must be >= 1, got {limit}")
        key = "outreach_limit" if args.cmd == "run-outreach" else "company_refresh_limit"
        overrides[key] = limit
    max_pages = getattr(args, "max_pages", None)
    if max_pages is not None and max_pages < 1:
        raise ConfigurationError(f"--max-pages must be >= 1, got {max_pages}")
    return dataclasses.replace(settings, **overrides) if overrides else settings


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    if getattr(args, "standalone", False):
        args.func(args)
        return
    if not os.getenv("RUN_ID"):
        os.environ["RUN_ID"] = _uuid.uuid4().hex
    try:
        settings = _settings_for(args)
        init_logging(settings.log_level)
        settings.require_session_source()
        ctx = args.func(args, settings)
    except (ConfigurationError, AuthenticationError) as exc:
        init_logging()
        logger.error("%s: %s", type(exc).__name__, exc, extra={"step": args.cmd, "status": "fatal"})
        sys.exit(1)
    print_summary(ctx, args.cmd)


if __name__ == "__main__":
    main()
