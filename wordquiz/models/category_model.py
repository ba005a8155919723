from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from wordquiz.db.base_class import Base


class Category(Base):
    __tablename__ = "categories"

    name: Mapped[str] = mapped_column(String(100), primary_key=True)
    icon: Mapped[str] = mapped_column(String(32), nullable=False, default="📚")  # emoji
    color: Mapped[str] = mapped_column(String(16), nullable=False, default="#95E1D3")  # hex colour for the UI

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return f"<Category(name='{self.name}')>"
