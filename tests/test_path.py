from __future__ import annotations

import copy
from pathlib import PurePosixPath

import pytest

from apathy import MemoryFileSystem, Path, Segment


def test_construct_from_text_and_numbers() -> None:
    assert Path("foo/bar").string() == "foo/bar"
    assert str(Path(5)) == "5"
    assert str(Path(3.14)) == "3.14"
    assert str(Path()) == ""
    assert str(Path(PurePosixPath("/a/b"))) == "/a/b"


def test_construct_with_formatter() -> None:
    assert str(Path(3.14159, formatter=lambda v: f"{v:.2f}")) == "3.14"
    with pytest.raises(TypeError):
        Path(1, formatter=lambda v: v)


def test_construct_rejects_unconvertible() -> None:
    with pytest.raises(TypeError):
        Path(b"/tmp")
    with pytest.raises(TypeError):
        Path(True)
    with pytest.raises(TypeError):
        Path(object())


def test_buffer_is_not_normalized() -> None:
    assert str(Path("a//b/./c/")) == "a//b/./c/"


def test_equality_is_textual() -> None:
    assert Path("/a/b") == Path("/a/b")
    assert Path("/a/b") == "/a/b"
    assert Path("/a/b") != Path("/a/b/")
    assert Path("a") != Path("./a")
    assert Path("a") != 1


def test_path_is_unhashable() -> None:
    with pytest.raises(TypeError):
        hash(Path("a"))


def test_copy_is_independent() -> None:
    original = Path("/a")
    for dup in (original.copy(), copy.copy(original), copy.deepcopy(original), Path(original)):
        dup.append("b")
        assert original == "/a"
        assert dup == "/a/b"


def test_append_chain() -> None:
    root = Path("/")
    root.append("hello").append("how").append("are").append("you")
    assert root.string() == "/hello/how/are/you"

    root = Path("/")
    root << "hello" << 5 << "how" << 3.14 << "are"
    assert root.string() == "/hello/5/how/3.14/are"


def test_append_trims_receiver_only() -> None:
    assert Path("a///").append("b/").string() == "a/b/"
    assert Path("a").append("/b").string() == "a//b"


def test_append_is_associative_for_relative_segments() -> None:
    left = Path("/x").append("b").append("c")
    right = Path("/x").append(Path.join("b", "c"))
    assert left == right


def test_truediv_does_not_mutate() -> None:
    base = Path("/usr")
    joined = base / "lib"
    assert joined == "/usr/lib"
    assert base == "/usr"


def test_trim() -> None:
    assert Path("/hello/how/are/you////").trim().string() == "/hello/how/are/you"
    assert Path("/hello/how/are/you").trim().string() == "/hello/how/are/you"
    assert Path("/hello/how/are/you/").trim().string() == "/hello/how/are/you"
    assert Path("").trim().string() == ""
    assert Path("/").trim().string() == ""


def test_directory_is_idempotent() -> None:
    assert Path("/hello/how/are/you").directory().string() == "/hello/how/are/you/"
    assert Path("/hello/how/are/you/").directory().string() == "/hello/how/are/you/"
    assert Path("/hello/how/are/you//").directory().string() == "/hello/how/are/you/"
    once = Path("a").directory().string()
    assert Path("a").directory().directory().string() == once


def test_relative() -> None:
    a = Path("/hello/how/are/you")
    assert a.relative("foo").string() == "/hello/how/are/you/foo"
    a = Path("/hello/how/are/you/")
    assert a.relative(Path("foo")).string() == "/hello/how/are/you/foo"
    assert a.relative("/fine/thank/you").string() == "/fine/thank/you"


def test_type_tests() -> None:
    assert Path("/a").is_absolute()
    assert not Path("a").is_absolute()
    assert not Path("").is_absolute()
    assert Path("a/").has_trailing_separator()
    assert not Path("a").has_trailing_separator()
    assert not Path("").has_trailing_separator()


def test_parent(memfs: MemoryFileSystem) -> None:
    a = Path("/hello/how/are/you")
    assert a.parent().string() == "/hello/how/are/"
    assert a.parent().parent().string() == "/hello/how/"
    assert a == "/hello/how/are/you"
    assert Path("/").parent().string() == "/"
    assert Path("").parent() == Path.cwd().parent()
    assert Path("").parent() == "/home/"


def test_up_mutates(memfs: MemoryFileSystem) -> None:
    a = Path("/a/b/")
    assert a.up() is a
    assert a == "/a/"
    assert Path("x/y").up() == "/home/user/x/"


def test_cwd_and_empty_path(memfs: MemoryFileSystem) -> None:
    cwd = Path.cwd()
    empty = Path("")
    assert cwd == "/home/user/"
    assert cwd != empty
    assert cwd.equivalent(empty)
    assert empty.equivalent(cwd)
    assert cwd.is_absolute()
    assert not empty.is_absolute()
    assert empty.absolute() == cwd


def test_equivalent_does_not_mutate(memfs: MemoryFileSystem) -> None:
    a = Path("foo////a/b/../c/")
    b = Path("foo/a/c/")
    assert a.equivalent(b)
    assert a == "foo////a/b/../c/"
    assert b == "foo/a/c/"

    a = Path("../foo/bar/")
    b = Path.cwd().parent().append("foo").append("bar").directory()
    assert a.equivalent(b)
    assert not Path("/a").equivalent("/b")


def test_equivalent_with_explicit_layer() -> None:
    fs = MemoryFileSystem()
    fs.create_directory("/srv")
    fs.chdir("/srv")
    assert Path("data").equivalent("/srv/data", fs=fs)


def test_split() -> None:
    segments = Path("foo/bar/baz").split()
    assert [s.segment for s in segments] == ["foo", "bar", "baz"]
    assert [s.directory for s in segments] == [True, True, False]


def test_split_counts_leading_and_trailing_separators() -> None:
    assert len(Path("a/b/c/").split()) == len(Path("a/b/c").split()) + 1
    assert Path("/a/b").split() == [
        Segment("", True),
        Segment("a", True),
        Segment("b", False),
    ]
    assert Path("a//b///").split() == [
        Segment("a", True),
        Segment("b", True),
        Segment("", False),
    ]
    assert len(Path("/").split()) == 2
    assert Path("").split() == []


def test_extension() -> None:
    assert Path("foo/bar.baz.out").extension() == "out"
    assert Path("foo/bar.baz/out").extension() == ""
    assert Path("archive.tar.gz").extension() == "gz"
    assert Path("noext").extension() == ""
    assert Path("dir/").extension() == ""


def test_stem_peels_one_extension_at_a_time() -> None:
    p = Path("foo/bar.baz.out")
    assert p.stem() == "foo/bar.baz"
    assert p.stem().stem() == "foo/bar"
    assert p.stem().stem().stem() == "foo/bar"
    assert p == "foo/bar.baz.out"
    assert Path("foo.d/bar").stem() == "foo.d/bar"


def test_fspath() -> None:
    import os

    assert os.fspath(Path("/a/b")) == "/a/b"
    assert repr(Path("/a")) == "Path('/a')"
