import csv
import os
import sys

import pytest

from treecomparator.compare import main


def _read_csv(path):
    with open(path, newline='', encoding='utf-8', errors='surrogateescape') as f:
        return list(csv.DictReader(f))


class TestMainArguments:

    def test_help_exits_zero(self, capsys):
        with pytest.raises(SystemExit) as excinfo:
            main(["--help"])
        assert excinfo.value.code == 0
        assert "PERFECT" in capsys.readouterr().out

    def test_missing_directory_is_an_error(self, tmp_path, capsys):
        (tmp_path / "d").mkdir()
        output = tmp_path / "out.csv"

        assert main([str(tmp_path / "d"), str(tmp_path / "nope"), str(output)]) == 1
        assert "not found or is not a directory" in capsys.readouterr().err
        assert not output.exists()

    def test_root_only_without_files_is_an_error(self, trees, make_file, tmp_path, capsys):
        dir_d, dir_t = trees
        make_file(dir_d / "sub" / "a.txt", size=1)

        assert main([str(dir_d), str(dir_t), str(tmp_path / "out.csv")]) == 1
        assert "No files found" in capsys.readouterr().err

    def test_unwritable_output_is_an_error(self, trees, make_file, tmp_path, capsys):
        dir_d, dir_t = trees
        make_file(dir_d / "a.txt", size=1)

        assert main([str(dir_d), str(dir_t), str(tmp_path / "no_such_dir" / "out.csv")]) == 1
        assert "Error writing output CSV" in capsys.readouterr().err

    def test_terminal_errors_are_not_reported_as_csv_errors(self, trees, make_file, tmp_path, capsys, monkeypatch):
        dir_d, dir_t = trees
        make_file(dir_d / "a.txt", size=1)

        def closed_pipe(pair, records):
            raise BrokenPipeError(32, "Broken pipe")

        monkeypatch.setattr("treecomparator.compare.print_directory_table", closed_pipe)

        with pytest.raises(BrokenPipeError):
            main([str(dir_d), str(dir_t), str(tmp_path / "out.csv")])
        assert "Error writing output CSV" not in capsys.readouterr().err


class TestMainEndToEnd:

    def test_single_perfect_file(self, trees, make_file, tmp_path, capsys):
        dir_d, dir_t = trees
        make_file(dir_d / "a.txt", content=b"a" * 100)
        make_file(dir_t / "a.txt", content=b"a" * 100)
        output = tmp_path / "out.csv"

        assert main([str(dir_d), str(dir_t), str(output)]) == 0

        rows = _read_csv(output)
        assert len(rows) == 1
        assert rows[0]["subdir"] == ""
        assert rows[0]["status"] == "PERFECT"
        out = capsys.readouterr().out
        assert "Subdir Summary: Total=1, Perfect=1" in out
        assert "FINAL SUMMARY" in out

    def test_recursive_with_exclusions(self, trees, make_file, tmp_path, capsys):
        dir_d, dir_t = trees
        make_file(dir_d / "root.log", size=10)
        make_file(dir_t / "root.log", size=10)
        make_file(dir_d / "gfs" / "atm.f006.nc", size=2_000_000)
        make_file(dir_t / "gfs" / "atm.f006_renamed.nc", size=2_000_500)
        make_file(dir_d / "gfs" / "onlyd.dat", size=20 * 1024 * 1024)
        make_file(dir_d / "products" / "p.grb2", size=10)
        make_file(dir_t / "products" / "p.grb2", size=11)
        output = tmp_path / "out.csv"

        assert main([str(dir_d), str(dir_t), str(output), "-r", "-m", "products"]) == 0

        rows = _read_csv(output)
        assert [(r["subdir"], r["d_file"], r["t_file"], r["status"]) for r in rows] == [
            (".", "root.log", "root.log", "PERFECT"),
            ("gfs", "atm.f006.nc", "atm.f006_renamed.nc", "CLOSE"),
            ("gfs", "onlyd.dat", "", "MISSING"),
        ]
        assert rows[2]["t_hash"] == "" and rows[2]["d_hash"] == ""
        assert "Comparing: products" not in capsys.readouterr().out

    def test_options_after_output_path(self, trees, make_file, tmp_path):
        dir_d, dir_t = trees
        make_file(dir_d / "sub" / "a.txt", size=3)
        make_file(dir_t / "sub" / "a.txt", size=3)
        output = tmp_path / "out.csv"

        assert main([str(dir_d), str(dir_t), "-r", str(output)]) == 0

        assert [r["subdir"] for r in _read_csv(output)] == ["sub"]

    def test_exclude_without_recursive_is_ignored(self, trees, make_file, tmp_path, capsys):
        dir_d, dir_t = trees
        make_file(dir_d / "a.txt", size=3)
        output = tmp_path / "out.csv"

        assert main([str(dir_d), str(dir_t), str(output), "-m", "a"]) == 0

        assert "only used in recursive mode" in capsys.readouterr().err
        assert len(_read_csv(output)) == 1

    def test_sha256_hashes_in_csv(self, trees, make_file, tmp_path):
        dir_d, dir_t = trees
        make_file(dir_d / "a.txt", content=b"abc")
        make_file(dir_t / "a.txt", content=b"abd")
        output = tmp_path / "out.csv"

        assert main([str(dir_d), str(dir_t), str(output), "--hash-algorithm", "sha256"]) == 0

        row = _read_csv(output)[0]
        assert len(row["d_hash"]) == 64
        assert row["status"] == "SIZE_OK"

    @pytest.mark.skipif(not sys.platform.startswith("linux") or sys.getfilesystemencoding() != "utf-8",
                        reason="needs a filesystem that accepts arbitrary name bytes")
    def test_name_that_is_not_utf8(self, trees, make_file, tmp_path, capsys):
        dir_d, dir_t = trees
        name = os.fsdecode(b"bad\xffname.nc")
        make_file(dir_d / name, content=b"0123456789")
        make_file(dir_t / name, content=b"0123456789")
        output = tmp_path / "out.csv"

        assert main([str(dir_d), str(dir_t), str(output)]) == 0

        rows = _read_csv(output)
        assert [(r["d_file"], r["t_file"], r["status"]) for r in rows] == [(name, name, "PERFECT")]
        assert "bad�name.nc" in capsys.readouterr().out

    def test_report_inside_dir_d_is_not_compared(self, trees, make_file, capsys, monkeypatch):
        dir_d, dir_t = trees
        make_file(dir_d / "a.txt", content=b"a" * 10)
        make_file(dir_t / "a.txt", content=b"a" * 10)
        monkeypatch.chdir(dir_d)

        # default output.csv in the current directory, which is DIR_D
        assert main([".", str(dir_t)]) == 0

        rows = _read_csv(dir_d / "output.csv")
        assert [(r["d_file"], r["status"]) for r in rows] == [("a.txt", "PERFECT")]
        assert "MISSING FILES" not in capsys.readouterr().out
