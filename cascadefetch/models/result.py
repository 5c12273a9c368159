from collections.abc import Awaitable, Callable
from typing import Annotated, Any, Literal

import httpx
from pydantic import BaseModel, ConfigDict, Field, PrivateAttr
from selectolax.lexbor import LexborHTMLParser

from cascadefetch.models.scraping import Mechanism


class FetchResult(BaseModel):
    """Plain HTTP result. ``document`` parses the body on first access only."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    mechanism: Literal[Mechanism.FETCH] = Mechanism.FETCH
    response: httpx.Response
    html: str = ""

    _document: LexborHTMLParser | None = PrivateAttr(default=None)

    @property
    def status_code(self) -> int:
        return self.response.status_code

    @property
    def document(self) -> LexborHTMLParser:
        if self._document is None:
            self._document = LexborHTMLParser(self.html)
        return self._document


class BrowserResult(BaseModel):
    """Rendered page. The caller owns the page and must await ``cleanup()`` once."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    mechanism: Literal[Mechanism.BROWSER] = Mechanism.BROWSER
    page: Any
    response: Any
    cleanup: Callable[[], Awaitable[None]]

    @property
    def status_code(self) -> int:
        return self.response.status


class CustomResult(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    mechanism: Literal[Mechanism.CUSTOM] = Mechanism.CUSTOM
    response: Any


ScrapeResult = Annotated[
    FetchResult | BrowserResult | CustomResult,
    Field(discriminator="mechanism"),
]
