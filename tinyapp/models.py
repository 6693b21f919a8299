"""
Domain Models for the TinyApp URL Shortener

This module defines the in-memory record shapes for:
- Link: the mapping between a short code and its long URL
- Visit: one resolution of a short code, used for visit history
- User: a registered account

Design Decisions:
- Plain pydantic models, mutated in place by the stores
- visit_count is kept on Link for quick stats; Visit rows hold the detail
- Timestamps are timezone-aware UTC
"""

from datetime import datetime, timezone

from pydantic import BaseModel, Field


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Link(BaseModel):
    """
    A short URL owned by one user.
    
    Fields:
    - id: Short code, unique among live links, frozen
    - long_url: Target address, the only field an owner may edit
    - owner_id: User id of the creator, frozen
    - date_created: When the link was created, frozen
    - visit_count: Total number of resolutions
    - unique_visitors: Visitor ids that resolved the link at least once
    """
    id: str = Field(frozen=True)
    long_url: str
    owner_id: str = Field(frozen=True)
    date_created: datetime = Field(default_factory=utcnow, frozen=True)
    visit_count: int = 0
    unique_visitors: set[str] = Field(default_factory=set)

    @property
    def unique_visit_count(self) -> int:
        return len(self.unique_visitors)


class Visit(BaseModel):
    """One resolution of a short code by a visitor (user id or anonymous id)."""
    visitor_id: str
    short_url: str
    date_visited: datetime = Field(default_factory=utcnow)


class User(BaseModel):
    id: str
    email: str
    password_hash: str
