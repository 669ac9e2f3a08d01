"""Remote content delivery integration."""

from .client import DeliveryClient, FetchError

__all__ = ["DeliveryClient", "FetchError"]
