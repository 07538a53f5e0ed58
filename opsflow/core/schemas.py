from typing import Generic, List, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

T = TypeVar("T")


# Configuration commune pour activer le mode ORM (from_attributes)
class OrmBaseModel(BaseModel):
    model_config = ConfigDict(
        from_attributes=True
    )


class ApiModel(OrmBaseModel):
    """Schéma d'API: clés camelCase en sortie, snake_case accepté en entrée."""
    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class Page(ApiModel, Generic[T]):
    """Réponse paginée générique."""
    items: List[T] = []
    total: int = 0

