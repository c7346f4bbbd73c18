import os

import pytest

from mpegjoin.errors import IOFailure, MergeError, ReplaceFailure, XingHeaderError
from mpegjoin.mp3.merge import Finalizer, MergeAccumulator, PrependRewriter
from mpegjoin.mp3.merge.io import rewrite_fs


def test_prepend_rewrites_in_place_and_leaves_no_temp_files(tmp_path):
    target = tmp_path / "out.mp3"
    target.write_bytes(b"BODY" * 1000)

    PrependRewriter(chunk_size=7).prepend(str(target), b"HEAD")

    assert target.read_bytes() == b"HEAD" + b"BODY" * 1000
    assert os.listdir(tmp_path) == ["out.mp3"]


def test_temp_write_failure_keeps_the_original(tmp_path, monkeypatch):
    target = tmp_path / "out.mp3"
    target.write_bytes(b"original")

    def boom(*_args, **_kwargs):
        raise OSError(28, "No space left on device")

    monkeypatch.setattr(rewrite_fs.shutil, "copyfileobj", boom)

    with pytest.raises(IOFailure) as exc:
        PrependRewriter().prepend(str(target), b"HEAD")

    assert not isinstance(exc.value, ReplaceFailure)
    assert exc.value.path == str(target)
    assert target.read_bytes() == b"original"
    assert os.listdir(tmp_path) == ["out.mp3"]


def test_failed_rename_is_a_replace_failure(tmp_path, monkeypatch):
    target = tmp_path / "out.mp3"
    target.write_bytes(b"original")

    def boom(*_args, **_kwargs):
        raise OSError(18, "Invalid cross-device link")

    monkeypatch.setattr(rewrite_fs.os, "replace", boom)

    with pytest.raises(ReplaceFailure) as exc:
        PrependRewriter().prepend(str(target), b"HEAD")

    assert exc.value.step == "replace"
    assert target.read_bytes() == b"original"


def test_missing_target_is_an_io_failure(tmp_path):
    with pytest.raises(IOFailure):
        PrependRewriter().prepend(str(tmp_path / "nope.mp3"), b"HEAD")
    assert os.listdir(tmp_path) == []


def test_finalize_puts_tag_before_xing_header(tmp_path, mp3, recorded_events):
    audio = [mp3.frame(), mp3.frame(bitrate_index=mp3.BR_320)]
    out = mp3.write(tmp_path / "out.mp3", audio)
    tag = mp3.id3v2(40, fill=b"t")
    source = mp3.write(tmp_path / "src.mp3", [tag, mp3.frame()])
    acc = MergeAccumulator(
        total_frames=2, total_bytes=sum(map(len, audio)), total_files=1, is_vbr=True
    )

    done = Finalizer(events=recorded_events.bus).finalize(out, acc, tag_source_path=source)

    assert done == (True, True)
    data = (tmp_path / "out.mp3").read_bytes()
    assert data[: len(tag)] == tag
    xing = data[len(tag) : len(tag) + len(audio[0])]
    assert xing[36:40] == b"Xing"
    assert data[len(tag) + len(audio[0]) :] == b"".join(audio)
    assert [e.kind.value for e in recorded_events.events] == [
        "xing_header_written",
        "tag_transplanted",
    ]


def test_finalize_is_a_no_op_for_cbr_without_tag(tmp_path, mp3):
    out = mp3.write(tmp_path / "out.mp3", [mp3.frame()])

    done = Finalizer().finalize(out, MergeAccumulator(total_frames=1, total_bytes=417))

    assert done == (False, False)
    assert (tmp_path / "out.mp3").read_bytes() == mp3.frame()


def test_missing_source_tag_leaves_output_untouched(tmp_path, mp3):
    out = mp3.write(tmp_path / "out.mp3", [mp3.frame()])
    source = mp3.write(tmp_path / "src.mp3", [mp3.frame(), mp3.id3v2(10)])

    assert Finalizer().add_id3v2_tag(out, source) is None
    assert (tmp_path / "out.mp3").read_bytes() == mp3.frame()


def test_xing_header_needs_a_template_frame(tmp_path):
    out = tmp_path / "out.mp3"
    out.write_bytes(b"no frames here")

    with pytest.raises(MergeError):
        Finalizer().add_xing_header(str(out), 0, 0)


def test_custom_rewriter_is_used(tmp_path, mp3):
    calls = []

    class RecordingRewriter:
        def prepend(self, path, prefix):
            calls.append((path, len(prefix)))

    out = mp3.write(tmp_path / "out.mp3", [mp3.frame()])
    Finalizer(rewriter=RecordingRewriter()).add_xing_header(out, 1, 417)

    assert calls == [(out, 417)]


def test_oversized_totals_are_a_merge_error(tmp_path, mp3):
    out = mp3.write(tmp_path / "out.mp3", [mp3.frame()])

    with pytest.raises(XingHeaderError) as exc:
        Finalizer().add_xing_header(out, 2**32, 417)

    assert isinstance(exc.value, MergeError)
    assert isinstance(exc.value.__cause__, ValueError)
    assert (tmp_path / "out.mp3").read_bytes() == mp3.frame()
    assert os.listdir(tmp_path) == ["out.mp3"]
