import os

import pytest

from mpegjoin import helpers as h
from mpegjoin.errors import NoInputFiles


def test_collect_inputs_sorts_and_filters(tmp_path, monkeypatch):
    for name in ["b.mp3", "a.mp3", "c.MP3x", "notes.txt"]:
        (tmp_path / name).write_bytes(b"x")
    (tmp_path / "dir.mp3").mkdir()
    monkeypatch.setattr(h.log, "debug", lambda m: None)

    files = h.collect_inputs(str(tmp_path))

    assert [os.path.basename(f) for f in files] == ["a.mp3", "b.mp3"]


def test_collect_inputs_custom_pattern(tmp_path):
    (tmp_path / "one.mp2").write_bytes(b"x")
    (tmp_path / "two.mp3").write_bytes(b"x")

    files = h.collect_inputs(str(tmp_path), pattern="*.mp2")

    assert [os.path.basename(f) for f in files] == ["one.mp2"]


def test_collect_inputs_empty_directory(tmp_path):
    with pytest.raises(NoInputFiles):
        h.collect_inputs(str(tmp_path))


def test_same_path_resolves_relative_paths_and_links(tmp_path, monkeypatch):
    target = tmp_path / "a.mp3"
    target.write_bytes(b"x")
    link = tmp_path / "link.mp3"
    link.symlink_to(target)
    monkeypatch.chdir(tmp_path)

    assert h.same_path("a.mp3", str(target))
    assert h.same_path(str(link), "./a.mp3")
    assert not h.same_path(str(target), str(tmp_path / "b.mp3"))


def test_same_path_for_files_that_do_not_exist_yet(tmp_path):
    missing = tmp_path / "out.mp3"
    assert h.same_path(str(missing), str(tmp_path / "sub" / ".." / "out.mp3"))
    assert not h.same_path(str(missing), str(tmp_path / "other.mp3"))
