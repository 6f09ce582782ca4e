"""ジオコーディング結果（成功・失敗を値として表す）"""
from dataclasses import dataclass
from typing import Optional

from .models import LocationView
from ....shared.exceptions.errors import GeocodingError


@dataclass(frozen=True)
class GeocodingResult:
    """1件のジオコーディング結果"""

    query: str  # 住所、または "lat,lon"
    location: Optional[LocationView] = None
    error: Optional[GeocodingError] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.location is not None

    @property
    def error_code(self) -> Optional[str]:
        return self.error.code if self.error is not None else None

    @property
    def error_message(self) -> Optional[str]:
        return str(self.error) if self.error is not None else None

    @classmethod
    def success(cls, query: str, location: LocationView) -> "GeocodingResult":
        return cls(query=query, location=location)

    @classmethod
    def failure(cls, query: str, error: GeocodingError) -> "GeocodingResult":
        return cls(query=query, error=error)
