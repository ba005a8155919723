from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from wordquiz.models.category_model import Category


def list_categories(db: Session) -> List[Category]:
    return db.query(Category).order_by(Category.name.asc()).all()


def get_category(db: Session, name: str) -> Optional[Category]:
    return db.get(Category, name)


def upsert_categories(db: Session, categories: Iterable[dict]) -> int:
    count = 0
    for entry in categories:
        existing = db.get(Category, entry["name"])
        if existing:
            existing.icon = entry.get("icon", existing.icon)
            existing.color = entry.get("color", existing.color)
        else:
            db.add(Category(name=entry["name"], icon=entry.get("icon", "📚"), color=entry.get("color", "#95E1D3")))
        count += 1
    db.commit()
    return count
