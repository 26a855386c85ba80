"""Tests for the conversion driver: raw buffer handling, naming, PNG output."""

from pathlib import Path

import numpy as np
import pytest
from PIL import Image

from planar_raw.convert import (
    ConvertOptions,
    candidate_output_path,
    convert_buffer,
    convert_file,
)
from planar_raw.core_types import GeometryCandidate, RawBuffer, SearchBounds
from planar_raw.errors import FormatError, InputError, NoCandidateError


class TestRawBuffer:
    def test_payload_skips_header(self):
        raw = RawBuffer(b"HDR" + bytes([1, 2, 3]), header_skip=3)
        assert raw.payload.tolist() == [1, 2, 3]
        assert len(raw) == 6
        assert not raw.payload.flags.writeable

    def test_header_may_consume_everything(self):
        assert RawBuffer(b"abc", header_skip=3).payload.size == 0

    def test_negative_header(self):
        with pytest.raises(InputError):
            RawBuffer(b"abc", header_skip=-1)

    def test_header_beyond_end(self):
        with pytest.raises(InputError):
            RawBuffer(b"abc", header_skip=4)


class TestOptions:
    def test_negative_header_skip(self):
        with pytest.raises(InputError):
            ConvertOptions(header_skip=-2).validate()

    def test_candidate_count_coerced(self):
        assert ConvertOptions(max_candidates=0).validate().max_candidates == 1


class TestNaming:
    def test_candidate_output_path(self):
        out = candidate_output_path(
            Path("out/pic.png"), 1, GeometryCandidate(320, 160, 3)
        )
        assert out == Path("out/pic_cand01_320x160_p3.png")

    def test_two_digit_rank(self):
        out = candidate_output_path(
            Path("pic.png"), 12, GeometryCandidate(64, 8, 5), suffix=".png"
        )
        assert out.name == "pic_cand12_64x8_p5.png"


class TestConvertBuffer:
    def test_header_planar_and_footer(self, band_planar, footer_bytes, footer_palette):
        raw = RawBuffer(b"\x00" * 10 + band_planar + footer_bytes, header_skip=10)
        result = convert_buffer(raw, ConvertOptions(max_candidates=2))
        assert result.planar_length == 16000
        assert np.array_equal(result.palette, footer_palette)
        best, image = result.decoded[0]
        assert (best.width, best.height, best.planes) == (320, 100, 4)
        assert image.indices.shape == (100, 320)
        assert len(result.candidates) == 2

    def test_grey_fallback(self, band_planar):
        options = ConvertOptions(
            require_palette=False, bounds=SearchBounds(min_planes=4, max_planes=4)
        )
        result = convert_buffer(RawBuffer(band_planar), options)
        assert result.palette.shape[0] == 16
        assert result.candidates[0].width == 320

    def test_short_file_with_footer(self):
        with pytest.raises(FormatError):
            convert_buffer(RawBuffer(bytes(20)), ConvertOptions())

    def test_no_candidate(self):
        options = ConvertOptions(require_palette=False)
        with pytest.raises(NoCandidateError):
            convert_buffer(RawBuffer(bytes(7)), options)


class TestConvertFile:
    def test_writes_ranked_pngs(
        self, tmp_path, band_planar, footer_bytes, footer_palette, capsys
    ):
        src = tmp_path / "pic.raw"
        src.write_bytes(band_planar + footer_bytes)
        written = convert_file(src, tmp_path / "pic.png", ConvertOptions(max_candidates=2))

        assert [p.name for p in written] == [
            "pic_cand01_320x100_p4.png",
            "pic_cand02_640x50_p4.png",
        ]
        with Image.open(written[0]) as im:
            assert im.size == (320, 100)
            rgba = np.array(im.convert("RGBA"))
        # band pixels map through the footer palette: x=0 -> 0, x=25 -> 1
        assert tuple(rgba[0, 0]) == tuple(footer_palette[0])
        assert tuple(rgba[50, 25]) == tuple(footer_palette[1])

        out = capsys.readouterr().out
        assert "OK pic.raw ->" in out
        assert "(320x100, 4 planes, score 0.00)" in out

    def test_header_skip_past_end(self, tmp_path):
        src = tmp_path / "tiny.raw"
        src.write_bytes(bytes(8))
        with pytest.raises(InputError):
            convert_file(src, tmp_path / "tiny.png", ConvertOptions(header_skip=9))

    def test_nothing_written_on_failure(self, tmp_path):
        src = tmp_path / "odd.raw"
        src.write_bytes(bytes(7))
        with pytest.raises(NoCandidateError):
            convert_file(src, tmp_path / "odd.png", ConvertOptions(require_palette=False))
        assert list(tmp_path.glob("*.png")) == []


class TestDebugOutput:
    def test_debug_lists_ranked_candidates(self, band_planar, footer_bytes, capsys):
        options = ConvertOptions(max_candidates=2, debug=True)
        convert_buffer(RawBuffer(band_planar + footer_bytes), options)
        out = capsys.readouterr().out
        assert "[debug] Bytes: 16,032" in out
        assert "#01 320x100_p4  score=0.00" in out
        assert out.count("geometries to score:") == 1
