from .person_record import ConnectionStatus, Person
from .company_record import Company, CompanyResolution, CompanySize, ResolvedBy
from .experience_record import Experience
from .profile_extraction_result import CompanyData, ProfileData
from .item_result import ItemResult

__all__ = [
    "ConnectionStatus",
    "Person",
    "Company",
    "CompanyResolution",
    "CompanySize",
    "ResolvedBy",
    "Experience",
    "CompanyData",
    "ProfileData",
    "ItemResult",
]
