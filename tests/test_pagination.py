"""Tests for cursor-based pagination."""

import pytest

from memstore.errors import InvalidArgumentError
from memstore.pagination import Page, PaginationOptions, paginate

ITEMS = ["a", "b", "c", "d", "e"]


def _identity(item):
    return item


class TestPaginationOptions:
    def test_defaults(self):
        """No cursor and no limit by default."""
        options = PaginationOptions()
        assert options.cursor is None
        assert options.limit is None

    @pytest.mark.parametrize("limit", [-1, 2.5, "3", True])
    def test_invalid_limit(self, limit):
        """The limit must be a non-negative int."""
        with pytest.raises(InvalidArgumentError):
            PaginationOptions(limit=limit)


class TestPaginate:
    """Tests for paginate."""

    def test_no_options_returns_everything(self):
        """Without options the whole sequence is one page."""
        page = paginate(ITEMS, _identity)
        assert page == Page(items=ITEMS, next_cursor=None, has_more=False)

    def test_limit(self):
        """A limit shorter than the sequence sets has_more and the cursor."""
        page = paginate(ITEMS, _identity, PaginationOptions(limit=2))
        assert page.items == ["a", "b"]
        assert page.has_more
        assert page.next_cursor == "b"

    def test_limit_equal_to_size(self):
        """A limit covering the rest leaves no next page."""
        page = paginate(ITEMS, _identity, PaginationOptions(limit=5))
        assert page.items == ITEMS
        assert not page.has_more
        assert page.next_cursor is None

    def test_following_cursors(self):
        """Following next_cursor visits every item once."""
        pages = []
        cursor = None
        while True:
            page = paginate(ITEMS, _identity, PaginationOptions(cursor=cursor, limit=2))
            pages.append(page)
            if not page.has_more:
                break
            cursor = page.next_cursor

        assert [len(p.items) for p in pages] == [2, 2, 1]
        assert [p.has_more for p in pages] == [True, True, False]
        assert [item for p in pages for item in p.items] == ITEMS

    def test_unknown_cursor(self):
        """An unknown cursor yields an empty page."""
        page = paginate(ITEMS, _identity, PaginationOptions(cursor="zzz", limit=2))
        assert page == Page()

    def test_cursor_on_last_item(self):
        """A cursor on the last item yields an empty page."""
        page = paginate(ITEMS, _identity, PaginationOptions(cursor="e"))
        assert page.items == []
        assert not page.has_more

    def test_cursor_without_limit_takes_the_rest(self):
        """Without a limit the page runs to the end."""
        page = paginate(ITEMS, _identity, PaginationOptions(cursor="b"))
        assert page.items == ["c", "d", "e"]
        assert not page.has_more

    def test_zero_limit(self):
        """A zero limit returns nothing but reports more."""
        page = paginate(ITEMS, _identity, PaginationOptions(limit=0))
        assert page.items == []
        assert page.has_more
        assert page.next_cursor is None

    def test_empty_sequence(self):
        """An empty sequence yields an empty page."""
        assert paginate([], _identity, PaginationOptions(limit=3)) == Page()

    def test_get_id_is_used_for_cursor(self):
        """Cursors are matched with get_id."""
        items = [{"id": "1"}, {"id": "2"}, {"id": "3"}]
        page = paginate(items, lambda item: item["id"], PaginationOptions(cursor="1", limit=1))
        assert page.items == [{"id": "2"}]
        assert page.next_cursor == "2"
