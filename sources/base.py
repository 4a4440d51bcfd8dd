"""
ProviderSpec — one catalog / content source described as plain data.

There are no per-site subclasses: every source is a record of CSS selectors
and the single extractor in sources/extractor.py consumes it. Adding a site
means adding one ProviderSpec to sources/registry.py.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional
from urllib.parse import quote_plus, urlparse


@dataclass(frozen=True)
class ProviderSpec:
    name: str
    search_url: str                     # template with a {query} placeholder

    # Result-item locator; the per-item selectors below are applied inside it
    item: Optional[str] = None
    name_selector: Optional[str] = None
    price: Optional[str] = None
    image: Optional[str] = None
    link: Optional[str] = None
    brand: Optional[str] = None
    description: Optional[str] = None

    # Page-level text locators (applied to the whole document)
    ingredients: Optional[str] = None
    packaging: Optional[str] = None

    def url_for(self, term: str) -> str:
        """Substitute the URL-quoted search term into the template."""
        return self.search_url.format(query=quote_plus(term.strip()))

    @property
    def host(self) -> str:
        return urlparse(self.search_url).netloc

    @property
    def lists_products(self) -> bool:
        """True when this source can yield priced candidate items (item, name and price locators)."""
        return bool(self.item and self.name_selector and self.price)
