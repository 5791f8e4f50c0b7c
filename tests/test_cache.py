"""Tests for the summary cache and its key function."""

import re

from aitrends.core.cache import SummaryCache, hash_text


class TestHashText:
    """Test the rolling-hash cache key."""

    def test_known_values(self):
        """Small inputs hash to h*31 + code unit, in base 36."""
        assert hash_text("") == "0"
        assert hash_text("a") == "2p"  # 97
        assert hash_text("ab") == "2e9"  # 97*31 + 98 = 3105

    def test_deterministic(self):
        text = "A tool for fast vector search."
        assert hash_text(text) == hash_text(text)

    def test_order_sensitive(self):
        assert hash_text("ab") != hash_text("ba")

    def test_format_is_signed_base36(self):
        """Long inputs wrap to a signed 32-bit value."""
        for text in ["x" * 1000, "Deep learning framework " * 50, "日本語のテキスト"]:
            assert re.fullmatch(r"-?[0-9a-z]+", hash_text(text))

    def test_wraps_to_32_bits(self):
        """Values beyond 2**31 wrap into the negative range."""
        keys = {hash_text("z" * n) for n in range(1, 40)}
        assert any(k.startswith("-") for k in keys)
        for k in keys:
            assert abs(int(k, 36)) <= 2 ** 31

    def test_distinct_texts_distinct_keys(self):
        """No collisions across a corpus of realistic descriptions."""
        corpus = [
            "A tool for fast vector search.",
            "A tool for fast vector search!",
            "Large language model fine-tuning toolkit",
            "Interactive AI demo by stabilityai",
            "No description available",
            "State-of-the-art diffusion models for image generation",
            "Transformers: state-of-the-art machine learning for PyTorch",
        ]
        keys = [hash_text(t) for t in corpus]
        assert len(set(keys)) == len(corpus)

    def test_non_bmp_characters_use_utf16_units(self):
        """Characters outside the BMP hash as their surrogate pair."""
        assert int(hash_text("😀"), 36) == 0xD83D * 31 + 0xDE00
        assert hash_text("\ud83d") == hash_text(chr(0xD83D))
        assert hash_text("😀") != hash_text("\ud83d")


class TestSummaryCache:
    """Test TTL behaviour with a manually advanced clock."""

    def test_get_missing(self, cache):
        assert cache.get("nope") is None

    def test_set_and_get_within_ttl(self, cache, clock):
        cache.set("k", "summary")
        clock.advance(299)
        assert cache.get("k") == "summary"

    def test_entry_at_ttl_is_not_returned(self, cache, clock):
        cache.set("k", "summary")
        clock.advance(300)
        assert cache.get("k") is None

    def test_sweep_removes_only_expired(self, cache, clock):
        cache.set("old", "a")
        clock.advance(200)
        cache.set("new", "b")
        clock.advance(101)

        removed = cache.sweep()

        assert removed == 1
        assert "old" not in cache
        assert cache.get("new") == "b"
        assert len(cache) == 1

    def test_sweep_keeps_entry_exactly_at_ttl(self, cache, clock):
        """Sweep purges entries strictly older than the TTL."""
        cache.set("k", "a")
        clock.advance(300)
        assert cache.sweep() == 0
        assert "k" in cache
        assert cache.get("k") is None

    def test_set_overwrites_and_refreshes(self, cache, clock):
        cache.set("k", "first")
        clock.advance(250)
        cache.set("k", "second")
        clock.advance(100)
        assert cache.get("k") == "second"

    def test_clear(self, cache):
        cache.set("a", "1")
        cache.set("b", "2")
        cache.clear()
        assert len(cache) == 0

    def test_instances_are_isolated(self, clock):
        first = SummaryCache(clock=clock)
        second = SummaryCache(clock=clock)
        first.set("k", "v")
        assert second.get("k") is None
