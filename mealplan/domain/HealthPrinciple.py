"""HealthPrinciple: a free-text dietary note that can be switched on or off."""
from typing import Optional


class HealthPrinciple:
    def __init__(self, id: str = "", name: str = "", description: Optional[str] = None,
                 enabled: bool = True, created_at: str = "", updated_at: str = ""):
        self.id = id
        self.name = name
        self.description = description
        self.enabled = bool(enabled)
        self.created_at = created_at
        self.updated_at = updated_at

    def __str__(self) -> str:
        state = "on" if self.enabled else "off"
        return f"{self.name} [{state}]"

    __repr__ = __str__

    @staticmethod
    def from_dict(data):
        d = dict(data) if isinstance(data, dict) else {}
        allowed = {"id", "name", "description", "enabled", "created_at", "updated_at"}
        return HealthPrinciple(**{k: v for k, v in d.items() if k in allowed})

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "enabled": self.enabled,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }
