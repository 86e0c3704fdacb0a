"""Search, filter, and sort engine for client, project, and issue listings."""

from accessdesk.listing.engine import (
    FilterSortEngine,
    apply_filters,
    apply_search,
    apply_sort,
    derive_view,
)
from accessdesk.listing.models import EntityFilterState, FilterConfig, FilterOption, SortDirection
from accessdesk.listing.predicates import (
    CLIENT_LISTING,
    COMBINED_LISTING,
    ISSUE_LISTING,
    PROJECT_LISTING,
    ListingSpec,
    combine,
)
from accessdesk.listing.view import (
    ClientListView,
    CombinedListView,
    IssueListView,
    ListView,
    ProjectListView,
)

__all__ = [
    "CLIENT_LISTING",
    "COMBINED_LISTING",
    "ISSUE_LISTING",
    "PROJECT_LISTING",
    "ClientListView",
    "CombinedListView",
    "EntityFilterState",
    "FilterConfig",
    "FilterOption",
    "FilterSortEngine",
    "IssueListView",
    "ListView",
    "ListingSpec",
    "ProjectListView",
    "SortDirection",
    "apply_filters",
    "apply_search",
    "apply_sort",
    "combine",
    "derive_view",
]
