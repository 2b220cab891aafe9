"""CSV ingestion modules, one per importable entity type.

Each module exposes COLUMNS, ingest(text, ...) and template().
"""

import ingestion.categories as categories
import ingestion.expenses as expenses
import ingestion.users as users

_INGESTION_MODULES = {
    "categories": categories,
    "expenses": expenses,
    "users": users,
}


def get_ingestion_module(module_name: str):
    """Get an ingestion module by entity name."""
    if module_name not in _INGESTION_MODULES:
        raise ValueError(f"Unknown ingestion module: {module_name}")
    return _INGESTION_MODULES[module_name]


def get_available_modules():
    """Get list of available ingestion modules."""
    return list(_INGESTION_MODULES.keys())


def get_expected_headers(module_name: str):
    """Header names a CSV file for this entity type must contain."""
    return [header for header, _ in get_ingestion_module(module_name).COLUMNS]
