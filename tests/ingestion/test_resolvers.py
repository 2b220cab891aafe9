from ingestion.resolvers import (
    by_email,
    by_id,
    by_name,
    resolve_category,
    resolve_category_fields,
    resolve_first,
    resolve_subcategory,
    resolve_subcategory_fields,
    resolve_user,
    resolve_user_fields,
)
from tests.helpers import make_category, make_user


class TestLookups:
    """Tests for the individual lookup functions."""

    def test_by_id_is_case_sensitive(self):
        """Test that ids must match exactly."""
        items = [make_category("A1", "Food")]
        assert by_id("A1", items) is items[0]
        assert by_id("a1", items) is None

    def test_by_name_ignores_case(self):
        """Test that names match case-insensitively."""
        items = [make_category("1", "Food & Dining")]
        assert by_name("food & DINING", items) is items[0]

    def test_empty_value_never_matches(self):
        """Test that an empty value is not found even if an attribute is empty."""
        items = [make_user("1", "", "alexc")]
        assert by_name("", items) is None

    def test_resolve_first_stops_at_first_hit(self, users):
        """Test that candidates are tried in order."""
        found = resolve_first([("missing", by_id), ("jane@example.com", by_email)], users)
        assert found.id == "2"


class TestResolveUser:
    """Tests for user resolution."""

    def test_by_id(self, users):
        """Test resolving a user by id."""
        assert resolve_user("2", users).username == "janes"

    def test_by_name(self, users):
        """Test resolving a user by display name."""
        assert resolve_user("JOHN DOE", users).id == "1"

    def test_by_username(self, users):
        """Test resolving a user by username."""
        assert resolve_user("Janes", users).id == "2"

    def test_by_email(self, users):
        """Test resolving a user by email."""
        assert resolve_user("john@example.com", users).id == "1"

    def test_not_found(self, users):
        """Test that an unknown value resolves to None."""
        assert resolve_user("nobody", users) is None

    def test_fields_fall_back_to_later_columns(self, users):
        """Test that an unknown id falls back to the username column."""
        user = resolve_user_fields(users, user_id="99", username="janes")
        assert user.id == "2"

    def test_fields_id_wins(self, users):
        """Test that a matching id wins over other columns."""
        user = resolve_user_fields(users, user_id="1", name="Jane Smith")
        assert user.id == "1"


class TestResolveCategory:
    """Tests for category and subcategory resolution."""

    def test_category_by_id_or_name(self, categories):
        """Test resolving a category by id and by name."""
        assert resolve_category("2", categories).name == "Transport"
        assert resolve_category("transport", categories).id == "2"

    def test_category_fields(self, categories):
        """Test resolving by the name column when the id is unknown."""
        assert resolve_category_fields(categories, "99", "Food").id == "1"
        assert resolve_category_fields(categories, "", "") is None

    def test_subcategory_within_category_only(self, categories):
        """Test that subcategories are only searched in the given category."""
        food, transport = categories
        assert resolve_subcategory("Groceries", food).id == "1"
        assert resolve_subcategory("Groceries", transport) is None
        assert resolve_subcategory("3", food) is None

    def test_subcategory_fields(self, categories):
        """Test resolving a subcategory from its id and name columns."""
        food = categories[0]
        assert resolve_subcategory_fields(food, "2", "").name == "Restaurants"
        assert resolve_subcategory_fields(food, "x", "restaurants").id == "2"
