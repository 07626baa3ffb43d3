# tests/test_item_ids.py
"""Tests for feed item id derivation."""

from feed_curator.item_ids import derive_item_id


class TestPermalink:
    def test_status_id(self):
        assert derive_item_id("https://x.com/someone/status/1789012345678901234") == "tweet-1789012345678901234"

    def test_relative_permalink(self):
        assert derive_item_id("/someone/status/42/photo/1") == "tweet-42"

    def test_permalink_without_status_falls_back_to_hash(self):
        assert derive_item_id("https://x.com/someone", username="", text="a") == "tweet-97"


class TestContentHash:
    def test_known_values(self):
        assert derive_item_id(text="a") == "tweet-97"
        assert derive_item_id(text="hello") == "tweet-99162322"

    def test_wraps_to_signed_32_bit(self):
        assert derive_item_id(text="Hello World") == "tweet--862545276"

    def test_stable(self):
        first = derive_item_id(username="@dev", text="shipping today", image_urls=["https://img/1.jpg"])
        second = derive_item_id(username="@dev", text="shipping today", image_urls=["https://img/1.jpg"])
        assert first == second

    def test_images_change_the_id(self):
        assert derive_item_id(text="same", image_urls=["a.jpg"]) != derive_item_id(text="same", image_urls=["b.jpg"])

    def test_only_text_prefix_counts(self):
        prefix = "x" * 50
        assert derive_item_id(text=prefix + "tail one") == derive_item_id(text=prefix + "tail two")

    def test_empty(self):
        assert derive_item_id() == "tweet-0"
