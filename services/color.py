"""
Product color resolution.

Colors have been stored three ways over the life of the product table:
rows in ``product_colors`` (a standard color reference or a custom hex),
and the deprecated ``products.colors`` JSON array holding either raw hex
strings or ``{id, name, hex_code}`` objects. Everything is normalized
into ``ColorDescriptor`` here.
"""
import enum
import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from models.color import ProductColor, StandardColor
from models.product import Product
from schemas.color import ColorDescriptor, ColorInput

logger = logging.getLogger(__name__)

HEX6_PATTERN = re.compile(r'#[0-9A-Fa-f]{6}')
DEFAULT_HEX = "#000000"
CUSTOM_COLOR_NAME = "Custom"
UNKNOWN_COLOR_NAME = "Unknown"


class ColorSource(str, enum.Enum):
    STANDARD_REF = "standard_ref"
    CUSTOM_HEX = "custom_hex"
    LEGACY_HEX_STRING = "legacy_hex_string"
    LEGACY_OBJECT = "legacy_object"
    UNRECOGNIZED = "unrecognized"


@dataclass(frozen=True)
class ColorEntry:
    source: ColorSource
    value: Any


def classify_color_entry(entry: Any) -> ColorEntry:
    """Tag a stored color entry with the representation it came from."""
    if isinstance(entry, ProductColor):
        if entry.custom_hex_code:
            return ColorEntry(ColorSource.CUSTOM_HEX, entry)
        if entry.color_id:
            return ColorEntry(ColorSource.STANDARD_REF, entry)
        return ColorEntry(ColorSource.UNRECOGNIZED, entry)

    if isinstance(entry, str) and HEX6_PATTERN.fullmatch(entry):
        return ColorEntry(ColorSource.LEGACY_HEX_STRING, entry)

    if isinstance(entry, dict) and "hex_code" in entry:
        return ColorEntry(ColorSource.LEGACY_OBJECT, entry)

    return ColorEntry(ColorSource.UNRECOGNIZED, entry)


class StandardColorIndex:
    """Case-insensitive hex lookup over the standard color table, loaded on first use."""

    def __init__(self, db: Session):
        self.db = db
        self._by_hex: Optional[Dict[str, StandardColor]] = None

    def _load(self) -> Dict[str, StandardColor]:
        try:
            colors = self.db.query(StandardColor).order_by(StandardColor.display_order).all()
        except SQLAlchemyError as e:
            # Treated as "no match" so legacy hexes fall back to custom colors
            logger.error(f"Error fetching standard colors: {str(e)}")
            self.db.rollback()
            return {}

        index = {}
        for color in colors:
            index.setdefault(color.hex_code.lower(), color)
        return index

    def match(self, hex_code: str) -> Optional[StandardColor]:
        if self._by_hex is None:
            self._by_hex = self._load()
        return self._by_hex.get(hex_code.lower())


def describe_color_entry(entry: ColorEntry, standard_colors: StandardColorIndex) -> Optional[ColorDescriptor]:
    """Map one classified entry onto a descriptor; None means skip it."""
    if entry.source in (ColorSource.STANDARD_REF, ColorSource.CUSTOM_HEX):
        row: ProductColor = entry.value
        standard = row.standard_color
        return ColorDescriptor(
            id=row.color_id or row.id,
            name=standard.name if standard else CUSTOM_COLOR_NAME,
            hex_code=row.custom_hex_code or (standard.hex_code if standard else None) or DEFAULT_HEX,
            custom=bool(row.custom_hex_code)
        )

    if entry.source == ColorSource.LEGACY_HEX_STRING:
        hex_code: str = entry.value
        matched = standard_colors.match(hex_code)
        if matched:
            return ColorDescriptor(
                id=matched.id,
                name=matched.name,
                hex_code=matched.hex_code,
                custom=False
            )
        return ColorDescriptor(
            id=f"color-{hex_code}",
            name=CUSTOM_COLOR_NAME,
            hex_code=hex_code,
            custom=True
        )

    if entry.source == ColorSource.LEGACY_OBJECT:
        data: dict = entry.value
        hex_code = str(data.get("hex_code") or DEFAULT_HEX)
        return ColorDescriptor(
            id=str(data.get("id") or f"color-{hex_code}"),
            name=str(data.get("name") or UNKNOWN_COLOR_NAME),
            hex_code=hex_code,
            custom=bool(data.get("custom", False))
        )

    return None


def _unique_by_id(colors: Iterable[ColorDescriptor]) -> List[ColorDescriptor]:
    seen = set()
    result = []
    for color in colors:
        if color.id in seen:
            continue
        seen.add(color.id)
        result.append(color)
    return result


def normalize_colors(entries: Iterable[Any], standard_colors: StandardColorIndex) -> List[ColorDescriptor]:
    descriptors = []
    for entry in entries:
        try:
            descriptor = describe_color_entry(classify_color_entry(entry), standard_colors)
        except ValidationError as e:
            logger.warning(f"Skipping unreadable color entry {entry!r}: {e.error_count()} validation errors")
            continue
        if descriptor is not None:
            descriptors.append(descriptor)
    return _unique_by_id(descriptors)


def get_product_color_rows(db: Session, product_id: str) -> List[ProductColor]:
    return db.query(ProductColor).filter(
        ProductColor.product_id == product_id
    ).order_by(ProductColor.position, ProductColor.created_at).all()


def resolve_product_colors(
    db: Session,
    product_id: str,
    legacy_colors: Optional[List[Any]] = None
) -> List[ColorDescriptor]:
    """
    Resolve the effective color list of a product.

    Join-table rows win outright; the legacy inline array is only read when
    the product has none. Pass ``legacy_colors`` when the product row is
    already loaded to skip re-reading it.
    """
    standard_colors = StandardColorIndex(db)

    try:
        rows = get_product_color_rows(db, product_id)
        if rows:
            return normalize_colors(rows, standard_colors)

        if legacy_colors is None:
            legacy_colors = db.query(Product.colors).filter(Product.id == product_id).scalar()
    except SQLAlchemyError as e:
        logger.error(f"Error fetching colors for product {product_id}: {str(e)}")
        db.rollback()
        return []

    if not isinstance(legacy_colors, list):
        return []

    return normalize_colors(legacy_colors, standard_colors)


def replace_product_colors(db: Session, product_id: str, colors: List[ColorInput]) -> List[ProductColor]:
    """
    Replace a product's color rows with ``colors``.

    Flushes but does not commit; callers own the transaction. Colors whose
    id is not a known standard color are stored as custom hex overrides.
    """
    db.query(ProductColor).filter(ProductColor.product_id == product_id).delete(synchronize_session=False)

    requested_ids = {c.id for c in colors if not c.custom and c.id}
    known_ids = set()
    if requested_ids:
        known_ids = {
            color_id for (color_id,) in
            db.query(StandardColor.id).filter(StandardColor.id.in_(requested_ids)).all()
        }

    rows = []
    for position, color in enumerate(colors):
        if not color.custom and color.id in known_ids:
            row = ProductColor(product_id=product_id, color_id=color.id, position=position)
        else:
            if not color.custom:
                logger.warning(
                    f"Unknown standard color {color.id} for product {product_id}, storing {color.hex_code} as custom"
                )
            row = ProductColor(product_id=product_id, custom_hex_code=color.hex_code.upper(), position=position)
        db.add(row)
        rows.append(row)

    db.flush()
    logger.info(f"Saved {len(rows)} colors for product {product_id}")
    return rows
