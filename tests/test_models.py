"""Tests for remote resource models."""

import pytest

from content_vault.models import (
    Asset,
    Entry,
    ResourceType,
    SynchronizedSpace,
)
from tests.factories import SYNC_URL, asset_item, deleted_item, entry_item


class TestResourceType:
    """Test ResourceType."""

    @pytest.mark.parametrize(
        "link_type,expected",
        [
            ("Asset", ResourceType.ASSET),
            ("asset", ResourceType.ASSET),
            ("Entry", ResourceType.ENTRY),
            ("ENTRY", ResourceType.ENTRY),
        ],
    )
    def test_from_link_type(self, link_type, expected):
        """Test link types are matched case-insensitively."""
        assert ResourceType.from_link_type(link_type) == expected

    @pytest.mark.parametrize("link_type", ["Space", "DeletedEntry", ""])
    def test_from_link_type_unknown(self, link_type):
        """Test other link types are rejected."""
        with pytest.raises(ValueError):
            ResourceType.from_link_type(link_type)


class TestResources:
    """Test Asset and Entry."""

    def test_entry_from_payload(self):
        """Test entry sys values are flattened."""
        entry = Entry.from_payload(entry_item("c1", name="Garfield"))

        assert entry.id == "c1"
        assert entry.type == ResourceType.ENTRY
        assert entry.content_type_id == "cat"
        assert entry.locale == "en-US"
        assert entry.raw_value("name", "en-US") == "Garfield"
        assert entry.raw_value("name", "de-DE") is None
        assert entry.raw_value("lives", "en-US") is None

    def test_asset_from_payload(self):
        """Test asset accessors read the file map."""
        asset = Asset.from_payload(asset_item("a1"))

        assert asset.type == ResourceType.ASSET
        assert asset.url("en-US") == "//images.example.com/cat.png"
        assert asset.mime_type("en-US") == "image/png"
        assert asset.title("en-US") == "Asset a1"
        assert asset.description("en-US") is None
        assert asset.url("de-DE") is None


class TestSynchronizedSpace:
    """Test SynchronizedSpace."""

    def test_from_items_sorts_by_type(self):
        """Test items are sorted into assets, entries and deletions."""
        space = SynchronizedSpace.from_items(
            [
                asset_item("a1"),
                entry_item("c1"),
                deleted_item("a2", "DeletedAsset"),
                deleted_item("c2"),
            ],
            f"{SYNC_URL}?sync_token=tok1",
        )

        assert [a.id for a in space.assets] == ["a1"]
        assert [e.id for e in space.entries] == ["c1"]
        assert space.deleted_assets == ["a2"]
        assert space.deleted_entries == ["c2"]

    def test_last_version_wins(self):
        """Test a resource listed twice keeps its last version."""
        space = SynchronizedSpace.from_items(
            [entry_item("c1", name="Old"), entry_item("c1", name="New")],
            f"{SYNC_URL}?sync_token=tok1",
        )

        assert len(space.entries) == 1
        assert space.entries[0].raw_value("name", "en-US") == "New"

    def test_unknown_item_type(self):
        """Test unknown item types are rejected."""
        with pytest.raises(ValueError):
            SynchronizedSpace.from_items(
                [{"sys": {"id": "x", "type": "Space"}}], SYNC_URL
            )

    def test_sync_token(self):
        """Test the token is read from the next sync URL."""
        space = SynchronizedSpace(next_sync_url=f"{SYNC_URL}?sync_token=abc%3D")

        assert space.sync_token == "abc="

    def test_sync_token_missing(self):
        """Test a next sync URL without token yields None."""
        assert SynchronizedSpace(next_sync_url=SYNC_URL).sync_token is None
