from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Product:
    product_id: int
    name: str
    description: Optional[str] = None

    def to_dict(self) -> dict:
        return {"id": self.product_id, "name": self.name, "description": self.description}


@dataclass(frozen=True)
class Franchise:
    franchise_id: int
    name: str

    def to_dict(self) -> dict:
        return {"id": self.franchise_id, "name": self.name}


@dataclass(frozen=True)
class RoleInfo:
    role_id: int
    name: str
    description: Optional[str] = None

    def to_dict(self) -> dict:
        return {"id": self.role_id, "name": self.name, "description": self.description}
