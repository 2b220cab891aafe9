"""Example CSV files for each importable entity type."""

EXPENSE_TEMPLATE_ROWS = [
    "ID,User ID,User Name,Username,Email,Category ID,Category Name,Subcategory ID,"
    "Subcategory Name,Amount,Description,Store Name,Store Location,Date,Created At",
    '1,1,Alex Chen,alexc,alex.chen@example.com,1,Food & Dining,1,Groceries,125.50,'
    '"Weekly grocery shopping","Whole Foods Market","Downtown Seattle",'
    "2025-01-15,2025-01-15T10:30:00Z",
]

CATEGORY_TEMPLATE_ROWS = [
    "Category ID,Category Name,Category Icon,Category Color,Subcategory ID,Subcategory Name",
    '1,"Food & Dining",UtensilsCrossed,text-orange-600,1,Groceries',
    '1,"Food & Dining",UtensilsCrossed,text-orange-600,2,Restaurants',
    "2,Transportation,Car,text-blue-600,3,Gas",
    '2,Transportation,Car,text-blue-600,4,"Public Transit"',
    "3,Entertainment,Music,text-purple-600,5,Movies",
]

USER_TEMPLATE_ROWS = [
    "User ID,Name,Username,Email,Avatar,Color,Default Category ID,"
    "Default Subcategory ID,Default Store Location",
    '1,"Alex Chen",alexc,alex.chen@example.com,AC,bg-emerald-500,1,1,"Downtown Seattle"',
    '2,"Sarah Johnson",sarahj,sarah.johnson@example.com,SJ,bg-blue-500,2,3,"Capitol Hill"',
    '3,"Mike Rodriguez",miker,mike.rodriguez@example.com,MR,bg-purple-500,3,5,Bellevue',
    '4,"Emma Wilson",emmaw,emma.wilson@example.com,EW,bg-pink-500,1,2,"Queen Anne"',
]


def expense_template() -> str:
    return "\n".join(EXPENSE_TEMPLATE_ROWS)


def category_template() -> str:
    return "\n".join(CATEGORY_TEMPLATE_ROWS)


def user_template() -> str:
    return "\n".join(USER_TEMPLATE_ROWS)
