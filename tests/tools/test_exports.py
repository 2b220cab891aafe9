import ingestion.categories as category_import
import ingestion.expenses as expense_import
import ingestion.users as user_import
from tools.exports import (
    export_categories_csv,
    export_expenses_csv,
    export_users_csv,
    format_amount,
)
from tests.helpers import make_category, make_expense, make_user


class TestFormatAmount:
    """Tests for format_amount function."""

    def test_whole_number(self):
        """Test that whole amounts have no decimal part."""
        assert format_amount(40.0) == "40"

    def test_fraction(self):
        """Test that fractional amounts are kept."""
        assert format_amount(12.5) == "12.5"


class TestExportExpenses:
    """Tests for export_expenses_csv function."""

    def test_columns_and_names(self, users, categories):
        """Test that an expense row carries the referenced names."""
        expense = make_expense(
            "e1", 12.5, description="Milk, eggs", store_name='Joe\'s "Market"'
        )

        lines = export_expenses_csv([expense], users, categories).splitlines()

        assert lines[0].startswith("ID,User ID,User Name,Username,Email,")
        assert lines[1] == (
            'e1,1,John Doe,johnd,john@example.com,1,Food,1,Groceries,12.5,'
            '"Milk, eggs","Joe\'s ""Market""",,2025-01-15,2025-01-15T10:30:00.000Z'
        )

    def test_unknown_references_left_blank(self, users, categories):
        """Test that names are blank when the references are unknown."""
        expense = make_expense("e1", user_id="9", category_id="9")

        row = export_expenses_csv([expense], users, categories).splitlines()[1]

        assert row.startswith("e1,9,,,,9,,1,,10,")

    def test_export_reimports(self, users, categories):
        """Test that exported expenses import back unchanged."""
        expenses = [
            make_expense("e1", 12.5, description='Say "cheese", please', store_location="Downtown"),
            make_expense("e2", 40.0, "2025-01-20", user_id="2", category_id="2",
                         subcategory_id="3"),
        ]

        text = export_expenses_csv(expenses, users, categories)
        result = expense_import.ingest(text, users, categories)

        assert result.errors == []
        assert result.valid == expenses


class TestExportCategories:
    """Tests for export_categories_csv function."""

    def test_one_row_per_subcategory(self, categories):
        """Test row layout, including a category without subcategories."""
        categories = categories + [make_category("3", "Misc")]

        lines = export_categories_csv(categories).splitlines()

        assert lines[1:] == [
            "1,Food,Tag,text-blue-600,1,Groceries",
            "1,Food,Tag,text-blue-600,2,Restaurants",
            "2,Transport,Tag,text-blue-600,3,Gas",
            "3,Misc,Tag,text-blue-600,,",
        ]

    def test_export_reimports(self, categories):
        """Test that exported categories import with the same shape."""
        result = category_import.ingest(export_categories_csv(categories))

        assert result.errors == []
        assert [c.name for c in result.valid] == ["Food", "Transport"]
        assert [len(c.subcategories) for c in result.valid] == [2, 1]


class TestExportUsers:
    """Tests for export_users_csv function."""

    def test_user_row(self):
        """Test a user row with optional defaults."""
        user = make_user("1", "Alex Chen", "alexc", default_store_location="Capitol Hill")

        lines = export_users_csv([user]).splitlines()

        assert lines[1] == "1,Alex Chen,alexc,alexc@example.com,AC,bg-blue-500,,,Capitol Hill"

    def test_export_reimports(self, users):
        """Test that exported users import into an empty store."""
        result = user_import.ingest(export_users_csv(users), [])

        assert result.errors == []
        assert [u.username for u in result.valid] == ["johnd", "janes"]
