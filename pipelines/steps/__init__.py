# Namespace for pipeline steps
from .session import EnsureSession  # noqa: F401
from .discover_people import DiscoverPeople, ExtractAndReconcilePeople, DiscoverAndReconcilePeople  # noqa: F401
from .refresh_companies import LoadPendingCompanies, RefreshCompanyProfiles  # noqa: F401
from .outreach import LoadOutreachCandidates, SendConnectionRequests  # noqa: F401
