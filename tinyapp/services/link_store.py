"""
Link Store

This service holds every short URL in memory and implements the owner-scoped
operations on them: create, read, update, delete, list and visit accounting.

Design Decisions:
- One dict keyed by short code; dicts keep insertion order, so listings are
  deterministic
- Every operation that touches the store takes the lock, so ownership and
  uniqueness checks cannot interleave with another mutation
- The caller identity is always an explicit argument, never ambient state
- Deleting a link also deletes its visit history (no orphaned Visit rows)
- Failed update/delete raise before touching anything
"""

import threading
from typing import Callable, Optional

from tinyapp.core.exceptions import ForbiddenError, NotFoundError, ShortCodeExhaustedError
from tinyapp.models import Link, Visit
from tinyapp.services.shortcode import DEFAULT_LENGTH, generate_short_code


class LinkStore:
    """
    In-memory store of Link records and their visit history.
    
    One instance is created per application and shared by all requests.
    """
    
    def __init__(
        self,
        code_length: int = DEFAULT_LENGTH,
        max_collision_retries: int = 10,
        generator: Optional[Callable[[int], str]] = None,
    ):
        """
        Initialize an empty store.
        
        Args:
            code_length: Length of generated short codes
            max_collision_retries: Draws allowed before create gives up
            generator: Short code generator, called with code_length
        """
        self.code_length = code_length
        self.max_collision_retries = max_collision_retries
        self.generator = generator or generate_short_code
        
        self._links: dict[str, Link] = {}
        self._visits: dict[str, list[Visit]] = {}
        self._lock = threading.Lock()
    
    def __len__(self) -> int:
        return len(self._links)
    
    def __contains__(self, short_code: object) -> bool:
        return short_code in self._links
    
    def _get_or_raise(self, short_code: str) -> Link:
        link = self._links.get(short_code)
        if link is None:
            raise NotFoundError("Short URL", short_code)
        return link
    
    def _owned_or_raise(self, short_code: str, caller_id: str) -> Link:
        link = self._get_or_raise(short_code)
        if link.owner_id != caller_id:
            raise ForbiddenError(short_code, caller_id)
        return link
    
    def _new_short_code(self) -> str:
        for _ in range(self.max_collision_retries):
            short_code = self.generator(self.code_length)
            if short_code not in self._links:
                return short_code
        raise ShortCodeExhaustedError(self.max_collision_retries)
    
    def create(self, long_url: str, owner_id: str) -> Link:
        """
        Create a link under a fresh short code.
        
        Args:
            long_url: The target address, stored as given
            owner_id: The creating user's id
        
        Returns:
            The new Link with visit_count 0
        
        Raises:
            ShortCodeExhaustedError: If every draw collided with a live code
        """
        with self._lock:
            short_code = self._new_short_code()
            link = Link(id=short_code, long_url=long_url, owner_id=owner_id)
            self._links[short_code] = link
            self._visits[short_code] = []
            return link
    
    def get(self, short_code: str) -> Link:
        """
        Look up a link by short code.
        
        Raises:
            NotFoundError: If no link has this short code
        """
        with self._lock:
            return self._get_or_raise(short_code)
    
    def get_owned(self, short_code: str, caller_id: str) -> Link:
        """
        Look up a link on behalf of its owner.
        
        Raises:
            NotFoundError: If no link has this short code
            ForbiddenError: If caller_id is not the owner
        """
        with self._lock:
            return self._owned_or_raise(short_code, caller_id)
    
    def update(self, short_code: str, caller_id: str, new_long_url: str) -> Link:
        """
        Point an owned link at a new long URL.
        
        Only long_url changes; id, owner, creation date and visit data stay.
        
        Raises:
            NotFoundError: If no link has this short code
            ForbiddenError: If caller_id is not the owner
        """
        with self._lock:
            link = self._owned_or_raise(short_code, caller_id)
            link.long_url = new_long_url
            return link
    
    def delete(self, short_code: str, caller_id: str) -> None:
        """
        Delete an owned link together with its visit history.
        
        Raises:
            NotFoundError: If no link has this short code
            ForbiddenError: If caller_id is not the owner
        """
        with self._lock:
            self._owned_or_raise(short_code, caller_id)
            del self._links[short_code]
            self._visits.pop(short_code, None)
    
    def list_by_owner(self, owner_id: str) -> list[Link]:
        """Return the owner's links in creation order."""
        with self._lock:
            return [link for link in self._links.values() if link.owner_id == owner_id]
    
    def resolve_visit(self, short_code: str, visitor_id: str) -> str:
        """
        Record a visit and return the long URL to redirect to.
        
        visit_count grows by one on every call; visitor_id is added to the
        unique visitor set once, however often the same visitor returns.
        
        Args:
            short_code: The short code being visited
            visitor_id: Logged-in user id or anonymous session visitor id
        
        Returns:
            The link's long URL
        
        Raises:
            NotFoundError: If no link has this short code
        """
        with self._lock:
            link = self._get_or_raise(short_code)
            link.visit_count += 1
            link.unique_visitors.add(visitor_id)
            self._visits[short_code].append(Visit(visitor_id=visitor_id, short_url=short_code))
            return link.long_url
    
    def visits_for(self, short_code: str) -> list[Visit]:
        """
        Return the visit history of a link, oldest first.
        
        Raises:
            NotFoundError: If no link has this short code
        """
        with self._lock:
            self._get_or_raise(short_code)
            return list(self._visits[short_code])
