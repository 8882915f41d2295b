"""Dependencies shared by the API controllers."""

from typing import Optional

from litestar.di import Provide
from litestar.params import Parameter

from feedback_collector.auth.guards import require_admin
from feedback_collector.scoping import FeedbackFilters


async def provide_filters(
    type_name: Optional[str] = Parameter(query="type", default=None, description="Type name substring"),
    rating: Optional[int] = Parameter(query="rating", default=None, ge=1, le=5),
    search: Optional[str] = Parameter(query="search", default=None, description="Matches name, email or message"),
) -> FeedbackFilters:
    """Query-string filters accepted by list, stats and export endpoints."""
    return FeedbackFilters.build(type_name=type_name, rating=rating, search=search)


ADMIN_DEPENDENCIES = {
    "admin": Provide(require_admin),
    "filters": Provide(provide_filters),
}
