from dataclasses import dataclass
from enum import Enum
from typing import Optional


class SortField(Enum):
    ID = "id"
    NAME = "name"
    DESCRIPTION = "description"
    IMAGE = "image"
    CREATED_AT = "createdAt"
    UPDATED_AT = "updatedAt"


class SortOrder(Enum):
    ASC = "asc"
    DESC = "desc"


@dataclass
class ListOptions:
    search: Optional[str] = None
    sort: Optional[SortField] = None
    order: SortOrder = SortOrder.ASC
