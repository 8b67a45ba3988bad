"""
Tests for s3:// and s3a:// path helpers.
"""
import pytest

from objectstore.exceptions import InvalidPathError
from objectstore.storage.paths import (
    ensure_suffix,
    is_valid_s3_path,
    is_valid_s3a_path,
    join_s3_paths,
    split_s3_path,
    split_s3a_path,
)


class TestIsValidPath:
    """Tests for path validation."""

    @pytest.mark.parametrize("path", [
        "s3://bucket/key",
        "s3://bucket/dir/key.json",
        "s3://bucket/dir/",
        "s3://b/k",
    ])
    def test_valid_s3_paths(self, path):
        assert is_valid_s3_path(path) is True

    @pytest.mark.parametrize("path", [
        "",
        "bucket/key",
        "s3://",
        "s3://bucket",
        "s3://bucket/",
        "s3:///key",
        "s3://bucket//key",
        "s3a://bucket/key",
        "S3://bucket/key",
        "gs://bucket/key",
    ])
    def test_invalid_s3_paths(self, path):
        assert is_valid_s3_path(path) is False

    @pytest.mark.parametrize("rest", ["a/b", "a/b/c", "a", "/b", "a/", "a//b", "", "/"])
    def test_valid_iff_non_empty_around_first_slash(self, rest):
        """Valid exactly when the bucket and the first key segment are non-empty."""
        head, sep, tail = rest.partition("/")
        expected = bool(sep) and head != "" and tail.split("/")[0] != ""
        assert is_valid_s3_path("s3://" + rest) is expected

    def test_valid_s3a_path(self):
        assert is_valid_s3a_path("s3a://bucket/key") is True
        assert is_valid_s3a_path("s3://bucket/key") is False
        assert is_valid_s3a_path("s3a://bucket") is False


class TestSplitPath:
    """Tests for splitting paths into bucket and key."""

    def test_split_s3_path(self):
        assert split_s3_path("s3://bucket/dir/key.json") == ("bucket", "dir/key.json")

    def test_split_keeps_trailing_slash(self):
        assert split_s3_path("s3://bucket/dir/") == ("bucket", "dir/")

    def test_split_s3a_path(self):
        assert split_s3a_path("s3a://bucket/a/b") == ("bucket", "a/b")

    def test_split_invalid_path_raises(self):
        with pytest.raises(InvalidPathError) as exc_info:
            split_s3_path("s3://bucket")
        assert exc_info.value.path == "s3://bucket"

    def test_split_s3a_invalid_path_raises(self):
        with pytest.raises(InvalidPathError, match="s3a"):
            split_s3a_path("s3://bucket/key")

    def test_invalid_path_error_is_value_error(self):
        with pytest.raises(ValueError):
            split_s3_path("not-a-path")


class TestJoinPaths:
    """Tests for join_s3_paths."""

    def test_join_no_paths(self):
        assert join_s3_paths() == ""

    def test_join_components(self):
        assert join_s3_paths("s3://b/x", "y", "z") == "s3://b/x/y/z"

    def test_join_single_path(self):
        assert join_s3_paths("s3://b/x") == "s3://b/x"

    def test_join_collapses_duplicate_separators(self):
        assert join_s3_paths("s3://b/x/", "/y") == "s3://b/x/y"

    @pytest.mark.parametrize("bucket,key", [
        ("bucket", "key"),
        ("my-bucket", "dir/sub/file.json"),
        ("b", "a.b.c"),
    ])
    def test_split_join_round_trip(self, bucket, key):
        assert split_s3_path(join_s3_paths("s3://" + bucket, key)) == (bucket, key)


def test_ensure_suffix():
    assert ensure_suffix("dir", "/") == "dir/"
    assert ensure_suffix("dir/", "/") == "dir/"
