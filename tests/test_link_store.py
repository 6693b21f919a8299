"""Tests for the in-memory link store."""

import threading

import pytest
from pydantic import ValidationError

from tinyapp.core.exceptions import ForbiddenError, NotFoundError, ShortCodeExhaustedError
from tinyapp.services.link_store import LinkStore


def scripted_generator(*codes):
    """Return a generator function that hands out the given codes in order."""
    remaining = iter(codes)
    return lambda length: next(remaining)


class TestCreate:
    """Test link creation."""

    def test_create_returns_fresh_record(self, link_store):
        link = link_store.create("http://example.com", "user-1")

        assert len(link.id) == 6
        assert link.long_url == "http://example.com"
        assert link.owner_id == "user-1"
        assert link.visit_count == 0
        assert link.unique_visitors == set()
        assert link.date_created.tzinfo is not None

    def test_created_id_is_new_and_stored(self, link_store):
        existing = {link_store.create(f"http://example.com/{i}", "user-1").id for i in range(20)}

        link = link_store.create("http://example.com/new", "user-2")

        assert link.id not in existing
        assert link.id in link_store
        assert link_store.get(link.id) is link
        assert len(link_store) == 21

    def test_create_draws_again_on_collision(self):
        store = LinkStore(generator=scripted_generator("aaaaaa", "aaaaaa", "aaaaaa", "bbbbbb"))

        first = store.create("http://one.com", "user-1")
        second = store.create("http://two.com", "user-1")

        assert first.id == "aaaaaa"
        assert second.id == "bbbbbb"
        assert store.get("aaaaaa").long_url == "http://one.com"

    def test_create_gives_up_after_retry_budget(self):
        store = LinkStore(max_collision_retries=3, generator=lambda length: "aaaaaa")
        store.create("http://one.com", "user-1")

        with pytest.raises(ShortCodeExhaustedError):
            store.create("http://two.com", "user-1")

        assert len(store) == 1

    def test_generator_receives_code_length(self):
        lengths = []

        def generator(length):
            lengths.append(length)
            return "x" * length

        store = LinkStore(code_length=8, generator=generator)
        link = store.create("http://example.com", "user-1")

        assert lengths == [8]
        assert link.id == "xxxxxxxx"

    def test_concurrent_creates_get_distinct_ids(self, link_store):
        ids = []
        ids_lock = threading.Lock()

        def worker():
            for _ in range(50):
                link = link_store.create("http://example.com", "user-1")
                with ids_lock:
                    ids.append(link.id)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(ids) == 400
        assert len(set(ids)) == 400
        assert len(link_store) == 400


class TestGet:

    def test_get_missing(self, link_store):
        with pytest.raises(NotFoundError):
            link_store.get("nope00")


class TestGetOwned:
    """Test the owner-checked read used by the show and stats pages."""

    def test_owner_gets_link(self, link_store):
        link = link_store.create("http://example.com", "user-1")
        assert link_store.get_owned(link.id, "user-1") is link

    @pytest.mark.parametrize("caller", ["user-1", "user-2"])
    def test_get_owned_missing(self, link_store, caller):
        with pytest.raises(NotFoundError):
            link_store.get_owned("nope00", caller)

    def test_get_owned_by_non_owner_is_forbidden(self, link_store):
        link = link_store.create("http://example.com", "user-1")

        with pytest.raises(ForbiddenError):
            link_store.get_owned(link.id, "user-2")


class TestUpdate:
    """Test owner-only updates."""

    def test_owner_updates_long_url_only(self, link_store):
        link = link_store.create("http://example.com", "user-1")
        link_store.resolve_visit(link.id, "visitor-A")
        created = link.date_created

        updated = link_store.update(link.id, "user-1", "http://other.com")

        assert updated.long_url == "http://other.com"
        assert updated.id == link.id
        assert updated.owner_id == "user-1"
        assert updated.date_created == created
        assert updated.visit_count == 1
        assert updated.unique_visitors == {"visitor-A"}

    @pytest.mark.parametrize("caller", ["user-1", "user-2"])
    def test_update_missing(self, link_store, caller):
        link_store.create("http://example.com", "user-1")

        with pytest.raises(NotFoundError):
            link_store.update("nope00", caller, "http://other.com")

    def test_update_by_non_owner_is_forbidden(self, link_store):
        link = link_store.create("http://example.com", "user-1")

        with pytest.raises(ForbiddenError):
            link_store.update(link.id, "user-2", "http://other.com")

        assert link_store.get(link.id).long_url == "http://example.com"

    @pytest.mark.parametrize(
        "field, value",
        [("id", "zzzzzz"), ("owner_id", "user-2"), ("date_created", "2000-01-01T00:00:00")],
    )
    def test_stored_link_identity_is_read_only(self, link_store, field, value):
        link = link_store.create("http://example.com", "user-1")

        with pytest.raises(ValidationError):
            setattr(link, field, value)

        assert link_store.get_owned(link.id, "user-1") is link
        assert link.owner_id == "user-1"


class TestDelete:
    """Test owner-only deletes."""

    def test_owner_deletes(self, link_store):
        link = link_store.create("http://example.com", "user-1")

        link_store.delete(link.id, "user-1")

        assert link.id not in link_store
        with pytest.raises(NotFoundError):
            link_store.get(link.id)

    @pytest.mark.parametrize("caller", ["user-1", "user-2"])
    def test_delete_missing(self, link_store, caller):
        with pytest.raises(NotFoundError):
            link_store.delete("nope00", caller)

    def test_delete_by_non_owner_is_forbidden(self, link_store):
        link = link_store.create("http://example.com", "user-1")

        with pytest.raises(ForbiddenError):
            link_store.delete(link.id, "user-2")

        assert link_store.get(link.id).long_url == "http://example.com"
        assert len(link_store) == 1

    def test_delete_drops_visit_history(self):
        store = LinkStore(generator=scripted_generator("aaaaaa", "aaaaaa"))
        link = store.create("http://example.com", "user-1")
        store.resolve_visit(link.id, "visitor-A")

        store.delete(link.id, "user-1")
        with pytest.raises(NotFoundError):
            store.visits_for(link.id)

        # a later link reusing the code starts with no history
        reused = store.create("http://other.com", "user-2")
        assert reused.id == "aaaaaa"
        assert store.visits_for(reused.id) == []
        assert reused.visit_count == 0


class TestListByOwner:

    def test_returns_exactly_owned_links_in_order(self, link_store):
        owners = ["user-1", "user-2", "user-1", "user-3", "user-1", "user-2"]
        created = [link_store.create(f"http://example.com/{i}", owner) for i, owner in enumerate(owners)]

        for owner in set(owners):
            expected = [link.id for link in created if link.owner_id == owner]
            assert [link.id for link in link_store.list_by_owner(owner)] == expected

    def test_unknown_owner(self, link_store):
        link_store.create("http://example.com", "user-1")
        assert link_store.list_by_owner("user-9") == []


class TestResolveVisit:
    """Test visit accounting."""

    def test_returns_long_url(self, link_store):
        link = link_store.create("http://example.com", "user-1")
        assert link_store.resolve_visit(link.id, "visitor-A") == "http://example.com"

    def test_repeat_visitor_counted_once(self, link_store):
        link = link_store.create("http://example.com", "user-1")

        link_store.resolve_visit(link.id, "visitor-A")
        link_store.resolve_visit(link.id, "visitor-A")

        assert link.visit_count == 2
        assert link.unique_visitors == {"visitor-A"}
        assert link.unique_visit_count == 1

    def test_distinct_visitors(self, link_store):
        link = link_store.create("http://example.com", "user-1")

        for visitor in ["visitor-A", "visitor-B", "visitor-A", "visitor-C"]:
            link_store.resolve_visit(link.id, visitor)

        assert link.visit_count == 4
        assert link.unique_visitors == {"visitor-A", "visitor-B", "visitor-C"}

    def test_records_visits_in_order(self, link_store):
        link = link_store.create("http://example.com", "user-1")
        other = link_store.create("http://other.com", "user-1")

        link_store.resolve_visit(link.id, "visitor-A")
        link_store.resolve_visit(other.id, "visitor-B")
        link_store.resolve_visit(link.id, "visitor-C")

        visits = link_store.visits_for(link.id)
        assert [v.visitor_id for v in visits] == ["visitor-A", "visitor-C"]
        assert all(v.short_url == link.id for v in visits)
        assert visits[0].date_visited <= visits[1].date_visited

    def test_resolve_missing(self, link_store):
        with pytest.raises(NotFoundError):
            link_store.resolve_visit("nope00", "visitor-A")
