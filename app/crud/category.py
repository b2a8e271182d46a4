"""CRUD operations for Category."""

from typing import List, Optional
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.crud.base import CRUDBase
from app.models.category import Category
from app.models.channel import Channel
from app.schemas.category import CategoryCreate, CategoryUpdate


class CRUDCategory(CRUDBase[Category, CategoryCreate, CategoryUpdate]):
    """CRUD operations for Category."""
    
    def get_all_ordered(self, db: Session) -> List[Category]:
        """Get all categories in display order."""
        stmt = select(Category).order_by(Category.display_order.asc(), Category.id.asc())
        return list(db.scalars(stmt).all())
    
    def get_by_name(
        self,
        db: Session,
        name: str,
        *,
        exclude_id: Optional[int] = None
    ) -> Optional[Category]:
        """Get category by name, ignoring case."""
        stmt = select(Category).where(Category.name_key == name.casefold())
        if exclude_id is not None:
            stmt = stmt.where(Category.id != exclude_id)
        return db.scalars(stmt.limit(1)).first()
    
    def create_category(self, db: Session, *, name: str) -> Category:
        """Create a category appended at the end of the display order."""
        return self.create(
            db,
            obj_in={
                "name": name,
                "display_order": self.next_display_order(db),
                "is_collapsed": False,
            },
        )
    
    def count_channels(self, db: Session, *, category_id: int) -> int:
        stmt = select(func.count(Channel.id)).where(Channel.category_id == category_id)
        return db.scalar(stmt) or 0
    
    def toggle_collapsed(self, db: Session, *, category: Category) -> Category:
        return self.update(db, db_obj=category, obj_in={"is_collapsed": not category.is_collapsed})


# Singleton instance
crud_category = CRUDCategory(Category)
