"""
Tests for size and timestamp conversions.
"""
import pytest

from reclaim.utils.convert_utils import ConvertUtils


class TestBytesToHuman:
    @pytest.mark.parametrize("size, text", [
        (0, "0B"),
        (512, "512B"),
        (1023, "1023B"),
        (1024, "1.00KB"),
        (1536, "1.50KB"),
        (5 * 1024 ** 2, "5.00MB"),
        (3 * 1024 ** 3, "3.00GB"),
        (2 * 1024 ** 4, "2.00TB"),
    ])
    def test_formats(self, size, text):
        assert ConvertUtils.bytes_to_human(size) == text


class TestHumanToBytes:
    @pytest.mark.parametrize("text, size", [
        ("1000", 1000),
        ("0", 0),
        ("1K", 1024),
        ("1kb", 1024),
        ("4MiB", 4 * 1024 ** 2),
        ("1.5GB", int(1.5 * 1024 ** 3)),
        (" 2 M ", 2 * 1024 ** 2),
        ("10B", 10),
    ])
    def test_parses(self, text, size):
        assert ConvertUtils.human_to_bytes(text) == size

    @pytest.mark.parametrize("text", ["", "abc", "1X", "1.2.3K", "MB"])
    def test_rejects_malformed(self, text):
        with pytest.raises(ValueError, match="Invalid size format"):
            ConvertUtils.human_to_bytes(text)

    def test_rejects_negative(self):
        with pytest.raises(ValueError, match="Negative"):
            ConvertUtils.human_to_bytes("-5K")

    def test_is_valid_size_format(self):
        assert ConvertUtils.is_valid_size_format("10MB")
        assert not ConvertUtils.is_valid_size_format("ten")


class TestTimestamp:
    def test_formats_timestamp(self):
        text = ConvertUtils.timestamp_to_human(0, fmt="%Y")
        assert text in ("1969", "1970")

    def test_invalid_timestamp(self):
        assert ConvertUtils.timestamp_to_human(1e20) == "Invalid timestamp"
