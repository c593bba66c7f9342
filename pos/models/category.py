"""Category model."""
from dataclasses import dataclass
from typing import Dict, Any

# Reserved id meaning "no filter"; it is neither creatable nor deletable.
ALL_CATEGORY_ID = 'all'


@dataclass(frozen=True)
class Category:
    """Product Category."""

    id: str
    name: str
    icon: str = 'Package'

    @property
    def is_sentinel(self) -> bool:
        return self.id == ALL_CATEGORY_ID

    def to_dict(self) -> Dict[str, Any]:
        return {'id': self.id, 'name': self.name, 'icon': self.icon}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Category':
        return cls(id=str(data['id']), name=data['name'], icon=data.get('icon') or 'Package')

    def __repr__(self):
        return f"<Category(id={self.id}, name='{self.name}')>"


DEFAULT_CATEGORIES = (
    Category(id=ALL_CATEGORY_ID, name='All', icon='Grid3x3'),
    Category(id='food', name='Food', icon='UtensilsCrossed'),
    Category(id='drinks', name='Drinks', icon='Coffee'),
    Category(id='desserts', name='Desserts', icon='Cake'),
)
