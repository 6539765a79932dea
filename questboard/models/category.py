"""
Task category model
"""
from sqlalchemy import Column, String, Integer, ForeignKey
from questboard.database import Base


class Category(Base):
    """Task category. Tasks reference it by id only; deletes do not cascade."""
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    color = Column(String(20), nullable=False)  # display hint, e.g. '#8b5cf6'
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
