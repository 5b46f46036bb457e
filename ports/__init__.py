from .page import PageDriver, first_visible
from .repos import PeopleRepoPort

__all__ = [
    "PageDriver",
    "first_visible",
    "PeopleRepoPort",
]
