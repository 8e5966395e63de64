from dataclasses import dataclass
from typing import Dict, Optional

from .core import Direction


@dataclass
class PageQuery:
    """Cursor page request - Fluent API for building query parameters"""

    cursor: Optional[str] = None
    direction: Direction = Direction.NEXT
    limit: Optional[int] = None
    domain: Optional[str] = None

    def after(self, cursor: Optional[str]):
        self.cursor = cursor
        self.direction = Direction.NEXT
        return self

    def before(self, cursor: str):
        self.cursor = cursor
        self.direction = Direction.PREV
        return self

    def with_limit(self, limit: int):
        self.limit = limit
        return self

    def in_domain(self, domain: Optional[str]):
        self.domain = domain
        return self

    def to_params(self) -> Dict[str, str]:
        """Query-string mapping; absent values are omitted."""
        params: Dict[str, str] = {}
        if self.cursor:
            params["cursor"] = self.cursor
        params["dir"] = self.direction.value
        if self.limit is not None:
            params["limit"] = str(self.limit)
        if self.domain:
            params["domain"] = self.domain
        return params
