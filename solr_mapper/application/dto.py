from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional

from ..domain.errors import QueryBuilderError
from ..domain.query import QueryExpression, SortSpec


@dataclass(frozen=True)
class QueryRequest:
    """Frozen parameters of one ``/select`` call.

    ``start`` and ``rows`` are sent only when set.
    """
    query: QueryExpression
    sort: SortSpec = field(default_factory=SortSpec)
    start: Optional[int] = None
    rows: Optional[int] = None

    def __post_init__(self) -> None:
        for name, value in (("start", self.start), ("rows", self.rows)):
            if value is not None and value < 0:
                raise QueryBuilderError(f"{name} must be >= 0, got {value}")

    def to_params(self) -> Dict[str, str]:
        params: Dict[str, str] = {"q": self.query.to_query()}
        if self.sort:
            params["sort"] = self.sort.to_param()
        if self.start is not None:
            params["start"] = str(self.start)
        if self.rows is not None:
            params["rows"] = str(self.rows)
        return params


@dataclass(frozen=True)
class UpdateOptions:
    """Optional ``waitFlush``/``waitSearcher`` flags of commit and optimize."""
    wait_flush: Optional[bool] = None
    wait_searcher: Optional[bool] = None

    def to_attributes(self) -> Dict[str, str]:
        attrs: Dict[str, str] = {}
        if self.wait_flush is not None:
            attrs["waitFlush"] = "true" if self.wait_flush else "false"
        if self.wait_searcher is not None:
            attrs["waitSearcher"] = "true" if self.wait_searcher else "false"
        return attrs
