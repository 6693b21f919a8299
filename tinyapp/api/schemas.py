"""
API Response Schemas

Pydantic models for the JSON stats endpoint. The HTML routes read form
fields directly and do not need request models.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from tinyapp.models import Link, Visit


class VisitResponse(BaseModel):
    """One recorded visit."""
    visitor_id: str
    date_visited: datetime


class LinkStatsResponse(BaseModel):
    """Response model for the link statistics endpoint."""
    short_code: str = Field(..., description="The short code")
    short_url: str = Field(..., description="The complete short URL")
    long_url: str = Field(..., description="The target URL")
    date_created: datetime
    visit_count: int
    unique_visit_count: int
    visits: list[VisitResponse]

    @classmethod
    def from_link(cls, link: Link, visits: list[Visit], base_url: str) -> "LinkStatsResponse":
        return cls(
            short_code=link.id,
            short_url=f"{base_url}/u/{link.id}",
            long_url=link.long_url,
            date_created=link.date_created,
            visit_count=link.visit_count,
            unique_visit_count=link.unique_visit_count,
            visits=[VisitResponse(visitor_id=v.visitor_id, date_visited=v.date_visited) for v in visits],
        )
