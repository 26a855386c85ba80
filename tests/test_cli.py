"""Tests for the raw_to_png command line: input resolution, batch report, exit codes."""

import pytest

import raw_to_png


def _args(*extra):
    return ["--workers", "1", *extra]


class TestSingleFile:
    def test_default_output_next_to_input(self, tmp_path, band_planar, footer_bytes, capsys):
        src = tmp_path / "scene.raw"
        src.write_bytes(band_planar + footer_bytes)
        assert raw_to_png.main(_args(str(src), "-n", "1")) == 0
        assert (tmp_path / "scene_cand01_320x100_p4.png").is_file()
        assert "Converted 1/1" in capsys.readouterr().out

    def test_explicit_output(self, tmp_path, band_planar, footer_bytes):
        src = tmp_path / "scene.raw"
        src.write_bytes(band_planar + footer_bytes)
        dst = tmp_path / "renders" / "guess.png"
        assert raw_to_png.main(_args(str(src), str(dst), "-n", "2")) == 0
        names = sorted(p.name for p in dst.parent.iterdir())
        assert names == ["guess_cand01_320x100_p4.png", "guess_cand02_640x50_p4.png"]

    def test_missing_input(self, tmp_path, capsys):
        assert raw_to_png.main(_args(str(tmp_path / "nope.raw"))) == 2
        assert "Input not found" in capsys.readouterr().err

    def test_bad_width_increment(self, tmp_path, band_planar):
        src = tmp_path / "scene.raw"
        src.write_bytes(band_planar)
        assert raw_to_png.main(_args(str(src), "--width-increment", "0")) == 2

    def test_zero_min_height(self, tmp_path, band_planar, footer_bytes, capsys):
        (tmp_path / "a_footer_only.raw").write_bytes(footer_bytes)
        (tmp_path / "b_good.raw").write_bytes(band_planar + footer_bytes)
        assert raw_to_png.main(_args(str(tmp_path), "--min-height", "0")) == 2
        assert "Minimum height must be at least 1." in capsys.readouterr().err

    def test_negative_header_skip(self, tmp_path, band_planar):
        src = tmp_path / "scene.raw"
        src.write_bytes(band_planar)
        assert raw_to_png.main(_args(str(src), "--header-skip", "-1")) == 2


class TestFolder:
    def test_no_candidate_keeps_going(self, tmp_path, band_planar, capsys):
        (tmp_path / "a_odd.raw").write_bytes(bytes(7))
        (tmp_path / "b_good.raw").write_bytes(band_planar)
        (tmp_path / "notes.txt").write_text("ignored")

        code = raw_to_png.main(_args(str(tmp_path), "--no-require-palette", "-n", "1"))
        assert code == 1
        out = capsys.readouterr().out
        assert "FAIL a_odd.raw:" in out
        assert "OK b_good.raw ->" in out
        written = [p.name for p in (tmp_path / "out").iterdir()]
        assert len(written) == 1 and written[0].startswith("b_good_cand01_")

    def test_outright_failure_exit_code(self, tmp_path, band_planar, footer_bytes, capsys):
        (tmp_path / "a_short.raw").write_bytes(bytes(12))
        (tmp_path / "b_good.raw").write_bytes(band_planar + footer_bytes)

        code = raw_to_png.main(_args(str(tmp_path), "-n", "1"))
        assert code == 2
        out = capsys.readouterr().out
        assert "FAIL a_short.raw: File too small to contain palette." in out
        assert (tmp_path / "out" / "b_good_cand01_320x100_p4.png").is_file()

    def test_pattern_and_output_dir(self, tmp_path, band_planar, footer_bytes):
        (tmp_path / "one.bin").write_bytes(band_planar + footer_bytes)
        (tmp_path / "two.raw").write_bytes(bytes(3))
        dst = tmp_path / "pngs"
        code = raw_to_png.main(_args(str(tmp_path), str(dst), "-p", "*.bin", "-n", "1"))
        assert code == 0
        assert [p.name for p in dst.iterdir()] == ["one_cand01_320x100_p4.png"]

    def test_parallel_jobs_report_in_file_order(
        self, tmp_path, band_planar, footer_bytes, capsys
    ):
        (tmp_path / "a.raw").write_bytes(band_planar + footer_bytes)
        (tmp_path / "b.raw").write_bytes(bytes(12))
        (tmp_path / "c.raw").write_bytes(band_planar + footer_bytes)

        code = raw_to_png.main(_args(str(tmp_path), "--jobs", "2", "-n", "1"))
        assert code == 2
        out = capsys.readouterr().out
        ok_a = out.index("OK a.raw ->")
        fail_b = out.index("FAIL b.raw:")
        ok_c = out.index("OK c.raw ->")
        assert ok_a < fail_b < ok_c
        assert "Converted 2/3" in out
        names = sorted(p.name for p in (tmp_path / "out").iterdir())
        assert names == ["a_cand01_320x100_p4.png", "c_cand01_320x100_p4.png"]

    def test_empty_folder(self, tmp_path):
        assert raw_to_png.main(_args(str(tmp_path))) == 0


class TestArgs:
    def test_defaults(self):
        args = raw_to_png.parse_cli_args(["in.raw"])
        options = raw_to_png.build_options(args)
        assert options.max_candidates == 5
        assert options.raw_file_pattern == "*.raw"
        assert options.require_palette is True
        b = options.bounds
        assert (b.min_planes, b.max_planes) == (3, 6)
        assert (b.min_width, b.max_width, b.width_increment) == (64, 640, 16)
        assert (b.min_height, b.max_height) == (1, 1024)
        assert options.header_skip == 0

    @pytest.mark.parametrize(
        "statuses, code",
        [
            ([], 0),
            (["ok", "ok"], 0),
            (["ok", "no-candidate"], 1),
            (["no-candidate", "failed"], 2),
        ],
    )
    def test_exit_code_for(self, statuses, code):
        assert raw_to_png.exit_code_for(statuses) == code
