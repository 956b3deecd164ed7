import os
import pytest
from tree_mirror.core.path_cursor import PathCursor, PathTooLongError

SEP = os.sep


def p(*parts):
    return SEP.join(parts)


class TestPushAndPop:
    """Segment operations on PathCursor"""

    def test_push_segment_appends(self):
        cursor = PathCursor.from_path(p("", "data"))
        assert cursor.push_segment(SEP + "docs").text == p("", "data", "docs")

    def test_operations_return_new_values(self):
        cursor = PathCursor.from_path(p("", "data"))
        deeper = cursor.push_segment(SEP + "docs")
        assert cursor.text == p("", "data")
        assert deeper is not cursor

    def test_pop_last_segment_keeps_separator(self):
        cursor = PathCursor.from_path(p("", "data", "docs", "a.txt"))
        assert cursor.pop_last_segment().text == p("", "data", "docs", "")

    def test_pop_last_segment_then_push_replaces_sibling(self):
        cursor = PathCursor.from_path(p("", "data", "a.txt"))
        sibling = cursor.pop_last_segment().push_segment("b.txt")
        assert sibling.text == p("", "data", "b.txt")

    def test_pop_full_level_gives_parent(self):
        cursor = PathCursor.from_path(p("", "data", "docs"))
        assert cursor.pop_full_level().text == p("", "data")

    def test_push_then_pop_full_level_restores(self):
        cursor = PathCursor.from_path(p("", "data"))
        assert cursor.push_segment(SEP + "docs").pop_full_level() == cursor

    def test_pop_full_level_keeps_root(self):
        cursor = PathCursor.from_path(SEP + "data")
        assert cursor.pop_full_level().text == SEP

    def test_fspath(self):
        cursor = PathCursor.from_path(p("", "data"))
        assert os.fspath(cursor) == p("", "data")
        assert str(cursor) == p("", "data")


class TestDeriveFromSource:
    """Nesting the destination under the source folder name"""

    def test_appends_last_source_segment(self):
        source = PathCursor.from_path(p("", "home", "me", "Documents"))
        destination = PathCursor.from_path(p("", "mnt", "backup"))
        assert destination.derive_from_source(source).text == p("", "mnt", "backup", "Documents")

    def test_ignores_trailing_separator(self):
        source = PathCursor.from_path(p("", "home", "me", "Documents", ""))
        destination = PathCursor.from_path(p("", "mnt", "backup"))
        assert destination.derive_from_source(source).text == p("", "mnt", "backup", "Documents")

    def test_destination_with_trailing_separator(self):
        source = PathCursor.from_path(p("", "home", "Documents"))
        destination = PathCursor.from_path(p("", "mnt", ""))
        assert destination.derive_from_source(source).text == p("", "mnt", "Documents")

    def test_source_without_name_leaves_destination(self):
        destination = PathCursor.from_path(p("", "mnt", "backup"))
        assert destination.derive_from_source(PathCursor.from_path(SEP)) == destination


class TestOverflow:
    """Behaviour at the path length ceiling"""

    def test_truncates_silently_by_default(self):
        cursor = PathCursor.from_path("abc", max_length=6)
        assert cursor.push_segment("defghij").text == "abcdef"

    def test_full_cursor_ignores_pushes(self):
        cursor = PathCursor.from_path("abcdef", max_length=6)
        assert cursor.push_segment("x").text == "abcdef"

    def test_error_policy_raises(self):
        cursor = PathCursor.from_path("abc", max_length=6, overflow="error")
        with pytest.raises(PathTooLongError):
            cursor.push_segment("defghij")

    def test_error_policy_allows_exact_fit(self):
        cursor = PathCursor.from_path("abc", max_length=6, overflow="error")
        assert cursor.push_segment("def").text == "abcdef"

    def test_invalid_policy_rejected(self):
        with pytest.raises(ValueError):
            PathCursor("x", overflow="wrap")
