from typing import Optional
import logging

from sqlalchemy.orm import Session

from models.color import StandardColor
from models.size import SizeCategory, StandardSize
from schemas.color import (
    ProductOptionsResponse, SizeCategoryResponse, StandardSizeResponse, StandardColorResponse
)

logger = logging.getLogger(__name__)

STANDARD_COLORS = [
    ("Black", "#000000"),
    ("White", "#FFFFFF"),
    ("Gray", "#808080"),
    ("Red", "#FF0000"),
    ("Orange", "#FFA500"),
    ("Yellow", "#FFFF00"),
    ("Green", "#008000"),
    ("Blue", "#0000FF"),
    ("Navy", "#000080"),
    ("Purple", "#800080"),
    ("Pink", "#FFC0CB"),
    ("Brown", "#A52A2A"),
]

SIZE_CATEGORIES = {
    "Clothing": ("Standard apparel sizes", ["XS", "S", "M", "L", "XL", "XXL"]),
    "Shoes": ("EU shoe sizes", ["36", "37", "38", "39", "40", "41", "42", "43", "44", "45"]),
    "One Size": ("Accessories and items without sizing", ["One Size"]),
}

def get_product_options(db: Session, size_category_id: Optional[str] = None) -> ProductOptionsResponse:
    """Size categories, the sizes of one category, and all standard colors"""
    categories = db.query(SizeCategory).order_by(SizeCategory.name).all()

    sizes = []
    if size_category_id:
        sizes = db.query(StandardSize).filter(
            StandardSize.size_category_id == size_category_id
        ).order_by(StandardSize.display_order).all()

    colors = db.query(StandardColor).order_by(StandardColor.display_order).all()

    return ProductOptionsResponse(
        sizeCategories=[SizeCategoryResponse.from_orm(c) for c in categories],
        sizes=[StandardSizeResponse.from_orm(s) for s in sizes],
        colors=[StandardColorResponse.from_orm(c) for c in colors]
    )

def seed_lookup_vocabularies(db: Session) -> dict:
    """Insert any missing standard colors, size categories and sizes."""
    created = {"colors": 0, "size_categories": 0, "sizes": 0}

    existing_hexes = {hex_code.upper() for (hex_code,) in db.query(StandardColor.hex_code).all()}
    for order, (name, hex_code) in enumerate(STANDARD_COLORS):
        if hex_code in existing_hexes:
            continue
        db.add(StandardColor(name=name, hex_code=hex_code, display_order=order))
        created["colors"] += 1

    for name, (description, values) in SIZE_CATEGORIES.items():
        category = db.query(SizeCategory).filter(SizeCategory.name == name).first()
        if not category:
            category = SizeCategory(name=name, description=description)
            db.add(category)
            db.flush()
            created["size_categories"] += 1

        existing_values = {
            value for (value,) in
            db.query(StandardSize.value).filter(StandardSize.size_category_id == category.id).all()
        }
        for order, value in enumerate(values):
            if value in existing_values:
                continue
            db.add(StandardSize(size_category_id=category.id, value=value, display_order=order))
            created["sizes"] += 1

    db.commit()
    logger.info(f"Seeded lookup vocabularies: {created}")
    return created
