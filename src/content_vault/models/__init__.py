"""Models for resources fetched from the remote content API."""

from .models import Asset, Entry, Resource, ResourceType, SynchronizedSpace

__all__ = [
    "Asset",
    "Entry",
    "Resource",
    "ResourceType",
    "SynchronizedSpace",
]
