"""Category import.

One CSV row describes one subcategory of a category; rows repeating a category
name (case-insensitive) are merged into a single category. Category and
subcategory ids from the file are not trusted: fresh sequential ids are
assigned from the caller's counters.
"""

from typing import Dict, Optional, Sequence

from ingestion.errors import RowError
from ingestion.ids import CategoryCounters
from ingestion.results import ImportResult
from ingestion.tabular import RawRecord, decode
from ingestion.templates import category_template
from logger import get_logger
from models.category import Category, Subcategory

logger = get_logger(__name__)

template = category_template

COLUMNS = [
    ("Category ID", "category_id"),
    ("Category Name", "category_name"),
    ("Category Icon", "icon"),
    ("Category Color", "color"),
    ("Subcategory ID", "subcategory_id"),
    ("Subcategory Name", "subcategory_name"),
]

DEFAULT_ICON = "Tag"
DEFAULT_COLOR = "text-blue-600"

VALID_ICONS = frozenset(
    [
        "UtensilsCrossed", "Utensils", "Car", "Music", "ShoppingBag", "Receipt",
        "Heart", "Home", "Plane", "Book", "Coffee", "Gamepad2", "Shirt", "Fuel",
        "Phone", "Wifi", "Zap", "Briefcase", "GraduationCap", "Baby", "PawPrint",
        "Wrench", "Gift", "Camera", "Dumbbell", "Tag", "Wine", "Pizza", "Cake",
        "Apple", "Beef", "Fish", "Salad", "IceCreamCone", "Cookie", "ChefHat",
        "Bike", "Bus", "Train", "Ship", "Truck", "ParkingCircle", "Navigation",
        "MapPin", "Compass", "Headphones", "Radio", "Tv", "Monitor", "Joystick",
        "Video", "Film", "Mic", "Speaker", "Volume2", "ShoppingCart", "Store",
        "Package", "CreditCard", "Wallet", "ScanLine", "Watch", "Activity",
        "PersonStanding", "Footprints", "Thermometer", "Stethoscope", "Pill",
        "Cross", "Shield", "Lightbulb", "Smartphone", "Laptop", "WashingMachine",
        "Refrigerator", "Sofa", "Bed", "Building", "Building2", "Factory",
        "Calculator", "FileText", "Folder", "Mail", "Users", "UserCheck",
        "BookOpen", "Library", "PenTool", "Edit", "Globe", "Award", "Trophy",
        "Map", "Luggage", "Binoculars", "Tent", "Mountain", "Palmtree", "Sun",
        "DollarSign", "PiggyBank", "TrendingUp", "TrendingDown", "BarChart3",
        "PieChart", "Coins", "Tablet", "Keyboard", "Mouse", "Printer",
        "HardDrive", "Bluetooth", "Scissors", "Brush", "Sparkles", "Droplets",
        "Moon", "Eye", "Smile", "Star", "Flower", "Leaf", "Dog", "Cat", "Bird",
        "Rabbit", "Squirrel", "Bug", "Turtle", "Bone", "Palette", "Guitar",
        "Piano", "Puzzle", "Dice1", "Target", "Telescope", "Microscope",
        "Circle", "Square", "Triangle", "Diamond", "Bookmark", "Flag", "Bell",
        "Clock", "Calendar", "Hash", "Plus",
    ]
)

VALID_COLORS = frozenset(
    f"text-{hue}-600"
    for hue in (
        "red", "orange", "amber", "yellow", "lime", "green", "emerald", "teal",
        "cyan", "sky", "blue", "indigo", "violet", "purple", "fuchsia", "pink",
        "rose", "slate",
    )
)


def normalize_icon(icon: str) -> str:
    """Return the icon if it is an accepted token, otherwise the default."""
    return icon if icon in VALID_ICONS else DEFAULT_ICON


def normalize_color(color: str) -> str:
    """Return the color if it is an accepted token, otherwise the default."""
    return color if color in VALID_COLORS else DEFAULT_COLOR


def validate(
    records: Sequence[RawRecord], counters: Optional[CategoryCounters] = None
) -> ImportResult[Category]:
    """Validate category rows and merge them into categories.

    Args:
        records: Decoded category rows.
        counters: Id counters to draw new ids from. Defaults to fresh counters
            starting at 1; pass CategoryCounters.after(existing) to avoid
            colliding with categories that are already stored.

    Returns:
        ImportResult with the merged categories in first-seen order.
    """
    counters = counters or CategoryCounters()
    by_name: Dict[str, Category] = {}
    result = ImportResult()

    for record in records:
        try:
            _accumulate(record, by_name, counters)
        except RowError as error:
            result.row_errors.append(error)

    result.valid = list(by_name.values())
    logger.info(
        f"Category import: {len(result.valid)} categories, "
        f"{sum(len(c.subcategories) for c in result.valid)} subcategories, "
        f"{len(result.row_errors)} rejected rows"
    )
    return result


def _accumulate(
    record: RawRecord, by_name: Dict[str, Category], counters: CategoryCounters
) -> None:
    name = record.get("category_name")
    subcategory_id = record.get("subcategory_id")
    subcategory_name = record.get("subcategory_name")

    if not record.get("category_id") or not name:
        raise RowError(record.row_number, "Category ID and Name are required")
    if subcategory_id and not subcategory_name:
        raise RowError(
            record.row_number,
            "Subcategory name is required when subcategory ID is provided",
        )

    category = by_name.get(name.lower())
    if category is None:
        category = Category(
            id=counters.categories.next(),
            name=name,
            icon=normalize_icon(record.get("icon")),
            color=normalize_color(record.get("color")),
        )
        by_name[name.lower()] = category

    if not subcategory_name:
        return

    wanted = subcategory_name.lower()
    if any(sub.name.lower() == wanted for sub in category.subcategories):
        logger.debug(
            f"Row {record.row_number}: skipping duplicate subcategory "
            f"'{subcategory_name}' in '{category.name}'"
        )
        return

    category.subcategories.append(
        Subcategory(
            id=counters.subcategories.next(),
            name=subcategory_name,
            category_id=category.id,
        )
    )


def ingest(
    text: str, counters: Optional[CategoryCounters] = None
) -> ImportResult[Category]:
    """Decode category CSV text and validate it.

    Raises:
        FormatError: If the text has no data or misses required columns.
    """
    table = decode(text, COLUMNS)
    return validate(table.records, counters).merge_errors(table.errors)
