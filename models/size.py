import uuid
from sqlalchemy import Column, String, Integer, Text, ForeignKey
from sqlalchemy.orm import relationship
from database.base import Base

class SizeCategory(Base):
    __tablename__ = "size_categories"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()), index=True)
    name = Column(String, nullable=False, unique=True)
    description = Column(Text, nullable=True)

    sizes = relationship("StandardSize", back_populates="category", order_by="StandardSize.display_order")

class StandardSize(Base):
    __tablename__ = "standard_sizes"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()), index=True)
    size_category_id = Column(String, ForeignKey("size_categories.id"), nullable=False, index=True)
    value = Column(String, nullable=False)
    display_order = Column(Integer, default=0)

    category = relationship("SizeCategory", back_populates="sizes")
