import os

import gemmi
import pytest

from cif2mtz.command_line.cif2mtz import run
from cif2mtz.spec import DEFAULT_SPEC


def test_print_spec(capsys):
    assert run(["--print-spec"]) == 0
    out = capsys.readouterr().out.splitlines()
    assert out[0].startswith("# Each line in the spec contains four words")
    assert out[-len(DEFAULT_SPEC) :] == list(DEFAULT_SPEC)


def test_convert_first_block(two_block_cif, tmp_path):
    out = str(tmp_path / "out.mtz")
    assert run([two_block_cif, out, "--title", "T", "-H", "one", "-H", "two"]) == 0
    mtz = gemmi.read_mtz_file(out)
    assert mtz.title == "T"
    assert list(mtz.history)[:2] == ["one", "two"]
    assert mtz.column_labels() == ["H", "K", "L", "FreeR_flag", "FP", "SIGFP"]


def test_convert_named_block(two_block_cif, tmp_path):
    out = str(tmp_path / "out.mtz")
    assert run([two_block_cif, out, "--block", "r1abcsf2"]) == 0
    mtz = gemmi.read_mtz_file(out)
    assert "M/ISYM" in mtz.column_labels()


def test_force_unmerged(merged_cif, tmp_path):
    out = str(tmp_path / "out.mtz")
    assert run([merged_cif, out, "--unmerged"]) == 0
    mtz = gemmi.read_mtz_file(out)
    # _refln.status is not written for unmerged data
    assert mtz.column_labels() == ["H", "K", "L", "M/ISYM", "BATCH", "FP", "SIGFP"]


def test_block_not_found(merged_cif, tmp_path):
    out = str(tmp_path / "out.mtz")
    assert run([merged_cif, out, "-b", "nope"]) == 1
    assert not os.path.exists(out)


def test_missing_index_tag(tmp_path):
    path = tmp_path / "noidx.cif"
    path.write_text(
        "data_x\nloop_\n_refln.index_h\n_refln.index_k\n_refln.F_meas_au\n1 2 3.0\n"
    )
    out = str(tmp_path / "out.mtz")
    assert run([str(path), out]) == 1
    assert not os.path.exists(out)


def test_bad_spec(merged_cif, tmp_path, caplog):
    spec = tmp_path / "bad.spec"
    spec.write_text("index_h H H 0\nindex_k K H\n")
    out = str(tmp_path / "out.mtz")
    assert run([merged_cif, out, "--spec", str(spec)]) == 2
    assert "index_k K H" in caplog.text
    assert not os.path.exists(out)


def test_custom_spec(merged_cif, tmp_path):
    spec = tmp_path / "my.spec"
    spec.write_text(
        "# indices\nindex_h H H 0\nindex_k K H 0\nindex_l L H 0\n\nF_meas_au FOBS F 1\n"
    )
    out = str(tmp_path / "out.mtz")
    assert run([merged_cif, out, "--spec", str(spec)]) == 0
    assert gemmi.read_mtz_file(out).column_labels() == ["H", "K", "L", "FOBS"]


def test_convert_dir(two_block_cif, tmp_path):
    outdir = tmp_path / "mtz"
    outdir.mkdir()
    assert run([two_block_cif, "--dir", str(outdir), "--nproc", "2"]) == 0
    assert sorted(os.listdir(outdir)) == ["r1abcsf.mtz", "r1abcsf2.mtz"]


def test_convert_dir_with_bad_block(two_block_cif, tmp_path):
    path = tmp_path / "three.cif"
    path.write_text(open(two_block_cif).read() + "\ndata_nothing\n_cell.length_a 10\n")
    outdir = tmp_path / "mtz"
    outdir.mkdir()
    assert run([str(path), "-d", str(outdir)]) == 1
    assert sorted(os.listdir(outdir)) == ["r1abcsf.mtz", "r1abcsf2.mtz"]


def test_convert_dir_write_error(two_block_cif, tmp_path):
    assert run([two_block_cif, "--dir", str(tmp_path / "missing")]) == 3


def test_write_error(merged_cif, tmp_path):
    assert run([merged_cif, str(tmp_path / "missing" / "out.mtz")]) == 3


def test_wrong_arguments(merged_cif, tmp_path):
    with pytest.raises(SystemExit):
        run([merged_cif])
    with pytest.raises(SystemExit):
        run([merged_cif, "a.mtz", "--dir", str(tmp_path)])
