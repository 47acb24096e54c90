from __future__ import annotations

from pydantic import BaseModel, Field


class ZoneCreate(BaseModel):
    name: str = Field(..., min_length=1)
    x: float
    y: float
    width: float = Field(..., gt=0)
    height: float = Field(..., gt=0)


class Zone(ZoneCreate):
    id: int

    def contains(self, x: float, y: float) -> bool:
        """Closed-rectangle test; edges count as inside."""
        return self.x <= x <= self.x + self.width and self.y <= y <= self.y + self.height
