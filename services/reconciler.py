from __future__ import annotations

import logging
import sqlite3
from dataclasses import dataclass
from typing import Optional

from db.repos.companies_repo import CompaniesRepo
from db.repos.experiences_repo import ExperiencesRepo
from db.repos.people_repo import PeopleRepo
from models.company_record import CompanyResolution
from models.person_record import Person
from models.profile_extraction_result import ProfileData


logger = logging.getLogger(__name__)


@dataclass
class ReconcileOutcome:
    person: Person
    company: Optional[CompanyResolution] = None
    experience_id: Optional[int] = None


class EntityReconciler:
    """Writes scraped profiles into people/companies/experiences with fixed identity rules."""

    def __init__(self, conn: sqlite3.Connection):
        self.people_repo = PeopleRepo(conn)
        self.companies_repo = CompaniesRepo(conn)
        self.experiences_repo = ExperiencesRepo(conn)

    def upsert_person(
        self,
        profile_url: str,
        profile: ProfileData,
        searching_role: Optional[str] = None,
        searching_country: Optional[str] = None,
    ) -> Person:
        person_id = self.people_repo.upsert_person(
            profile_url=profile_url,
            full_name=profile.full_name,
            headline=profile.headline,
            country=profile.country,
            searching_role=searching_role,
            searching_country=searching_country,
        )
        person = self.people_repo.get(person_id)
        if person is None:
            raise RuntimeError(f"Person {person_id} not found right after upsert of {profile_url}")
        return person

    def upsert_company(self, name: str, url: Optional[str] = None) -> CompanyResolution:
        resolution = self.companies_repo.upsert_company(name, url)
        logger.debug(
            "Company %r resolved by %s -> id=%d", name, resolution.resolved_by.value, resolution.company_id,
            extra={"step": "reconcile", "url": url or "-"},
        )
        return resolution

    def record_experience(self, person_id: int, company_id: Optional[int], profile: ProfileData) -> int:
        """Insert a current experience row; earlier rows of the person are left as they are."""
        return self.experiences_repo.insert(
            person_id=person_id,
            company_id=company_id,
            company_name=profile.latest_company_name or "",
            company_url=profile.latest_company_url,
            title=profile.title,
            is_current=True,
            description=profile.description,
            duration=profile.duration,
        )

    def reconcile_profile(
        self,
        profile_url: str,
        profile: ProfileData,
        searching_role: Optional[str] = None,
        searching_country: Optional[str] = None,
    ) -> ReconcileOutcome:
        person = self.upsert_person(profile_url, profile, searching_role, searching_country)
        outcome = ReconcileOutcome(person=person)
        if profile.latest_company_name:
            outcome.company = self.upsert_company(profile.latest_company_name, profile.latest_company_url)
            outcome.experience_id = self.record_experience(person.id, outcome.company.company_id, profile)
        return outcome
