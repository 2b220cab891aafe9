from ingestion.ids import CategoryCounters, IdCounter, max_numeric_id
from tests.helpers import make_category


class TestIdCounter:
    """Tests for IdCounter and max_numeric_id."""

    def test_starts_at_one(self):
        """Test that a fresh counter hands out 1, 2, 3."""
        counter = IdCounter()
        assert [counter.next(), counter.next(), counter.next()] == ["1", "2", "3"]

    def test_after_existing_ids(self):
        """Test that a seeded counter continues past the largest numeric id."""
        counter = IdCounter.after(["3", "10", "abc", "7"])
        assert counter.next() == "11"

    def test_max_numeric_id_ignores_non_numeric(self):
        """Test that non-numeric ids are skipped."""
        assert max_numeric_id(["exp-1", "", "x"]) == 0
        assert max_numeric_id([" 5 ", "2"]) == 5

    def test_counters_are_independent(self):
        """Test that two counters do not share state."""
        first = IdCounter()
        second = IdCounter()
        first.next()
        assert second.next() == "1"


class TestCategoryCounters:
    """Tests for CategoryCounters."""

    def test_after_existing_categories(self):
        """Test seeding both counters from stored categories."""
        existing = [
            make_category("4", "Food", [("9", "Groceries")]),
            make_category("2", "Transport", [("3", "Gas")]),
        ]
        counters = CategoryCounters.after(existing)

        assert counters.categories.next() == "5"
        assert counters.subcategories.next() == "10"

    def test_defaults_start_at_one(self):
        """Test that fresh counters start at 1."""
        counters = CategoryCounters()
        assert counters.categories.next() == "1"
        assert counters.subcategories.next() == "1"
