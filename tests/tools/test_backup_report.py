from models.backup import BackupDocument
from tools.backup_report import format_readable_backup
from tests.helpers import make_category, make_expense, make_user


def document(**overrides):
    data = {
        "version": "1.0.0",
        "timestamp": "2025-01-15T10:00:00.000Z",
        "users": [],
        "categories": [],
        "subcategories": [],
        "expenses": [],
        "credentials": {},
        "settings": {},
        "useCase": "personal-team",
    }
    data.update(overrides)
    return BackupDocument.model_validate(data)


class TestFormatReadableBackup:
    """Tests for format_readable_backup function."""

    def test_empty_backup(self):
        """Test the report for a backup with no data."""
        lines = format_readable_backup(document()).splitlines()

        assert lines[0] == "EXPENSE TRACKER BACKUP"
        assert lines[1] == "=" * 50
        assert lines[2].startswith("Backup Date: January 15, 2025")
        assert "Version: 1.0.0" in lines
        assert "Use Case: personal-team" in lines
        assert "No users found" in lines
        assert "No categories found" in lines
        assert "Total Expenses: 0" in lines
        assert "No expenses found" in lines

    def test_sections(self):
        """Test users, categories and the expense summary."""
        food = make_category("1", "Food", [("1", "Groceries")]).to_dict(
            include_subcategories=False
        )
        expenses = [
            make_expense("e1", 12.5, "2025-01-10", store_name="Market").to_dict(),
            make_expense("e2", 7.25, "2025-01-20", user_id="9").to_dict(),
        ]
        report = format_readable_backup(
            document(
                users=[make_user("1", "Alex Chen", "alexc").to_dict()],
                categories=[food],
                subcategories=[{"id": "1", "name": "Groceries", "categoryId": "1"}],
                expenses=expenses,
            )
        )
        lines = report.splitlines()

        assert "1. Alex Chen (alexc)" in lines
        assert "   Email: alexc@example.com" in lines
        assert "   Default Location: None" in lines
        assert "1. Food (Tag)" in lines
        assert "   - Groceries" in lines
        assert "Total Expenses: 2" in lines
        assert "Total Amount: $19.75" in lines
        assert "Date Range: 2025-01-10 to 2025-01-20" in lines
        assert "RECENT EXPENSES (Last 10):" in lines

        recent = lines[lines.index("RECENT EXPENSES (Last 10):") + 2:]
        assert recent[0] == "1. $7.25 - Groceries"
        assert recent[1] == "   User: Unknown"
        assert "   Store: Market" in recent

    def test_recent_list_capped(self):
        """Test that only ten expenses are listed."""
        expenses = [
            make_expense(f"e{i}", 1.0, f"2025-01-{i:02d}").to_dict() for i in range(1, 16)
        ]

        report = format_readable_backup(document(expenses=expenses))

        assert "10. $1.00 - Groceries" in report
        assert "11. $1.00" not in report
        assert "Total Expenses: 15" in report
