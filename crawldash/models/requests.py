from typing import List, Optional

from pydantic import BaseModel


class AddURLRequest(BaseModel):
    url: str


class BulkAddURLsRequest(BaseModel):
    urls: List[str]


class IDsRequest(BaseModel):
    """Body of the batched delete and recrawl calls."""

    ids: List[int | str]


class CrawlURLsParams(BaseModel):
    page: Optional[int] = None
    limit: Optional[int] = None
    status: Optional[str] = None
    search: Optional[str] = None

    def to_query(self) -> dict:
        """Return only the parameters that are set and truthy."""
        return {key: str(value) for key, value in self.model_dump().items() if value}
