from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional


@dataclass
class CatalogItem:
    """A product as created in the external catalog."""
    id: str
    name: str


@dataclass
class CatalogPrice:
    id: str
    product_id: str
    unit_amount: int
    currency: str


@dataclass
class CatalogAccount:
    id: str
    email: Optional[str] = None


class CatalogConnector(ABC):
    """
    Abstract Base Class for external payment catalogs.
    """

    def __init__(self, secret_key: str, **kwargs):
        self.secret_key = secret_key
        self.config = kwargs

    @abstractmethod
    async def create_product(self, name: str, description: Optional[str] = None, images: Optional[List[str]] = None) -> CatalogItem:
        """
        Creates a catalog item.
        """
        pass

    @abstractmethod
    async def create_price(self, product_id: str, unit_amount: int, currency: str) -> CatalogPrice:
        """
        Creates a price for a catalog item. unit_amount is in minor units.
        """
        pass

    @abstractmethod
    async def update_product(self, product_id: str, name: Optional[str] = None, description: Optional[str] = None) -> CatalogItem:
        """
        Updates name and/or description of a catalog item.
        """
        pass

    @abstractmethod
    async def retrieve_account(self) -> CatalogAccount:
        """
        Fetches the account the secret key belongs to. Used to verify keys.
        """
        pass
