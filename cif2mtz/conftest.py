import pytest

from cif2mtz.source import ReflectionLoop, ReflectionSource

MERGED_CIF = """\
data_r1abcsf
_cell.length_a 50.0
_cell.length_b 60.0
_cell.length_c 70.0
_cell.angle_alpha 90.0
_cell.angle_beta 90.0
_cell.angle_gamma 90.0
_symmetry.space_group_name_H-M 'P 21 21 21'
_diffrn_radiation_wavelength.id 1
_diffrn_radiation_wavelength.wavelength 0.9795
loop_
_refln.index_h
_refln.index_k
_refln.index_l
_refln.status
_refln.F_meas_au
_refln.F_meas_sigma_au
1 2 3 o 100.0 5.0
2 0 4 f ? ?
0 0 6 o 50.5 2.5
"""

UNMERGED_CIF = """\
data_r1abcsf2
_cell.length_a 40.0
_cell.length_b 40.0
_cell.length_c 40.0
_cell.angle_alpha 90.0
_cell.angle_beta 90.0
_cell.angle_gamma 90.0
_symmetry.space_group_name_H-M 'P 1'
loop_
_diffrn_refln.diffrn_id
_diffrn_refln.id
_diffrn_refln.index_h
_diffrn_refln.index_k
_diffrn_refln.index_l
_diffrn_refln.intensity_net
_diffrn_refln.intensity_sigma
1 1 1 2 3 120.0 10.0
1 2 -1 -2 -3 118.0 11.0
"""

EMPTY_REFLN_CIF = """\
data_r1emptysf
_cell.length_a 30.0
_cell.length_b 30.0
_cell.length_c 30.0
_cell.angle_alpha 90.0
_cell.angle_beta 90.0
_cell.angle_gamma 90.0
_symmetry.space_group_name_H-M 'P 1'
loop_
_refln.index_h
_refln.index_k
_refln.index_l
_refln.F_meas_au
"""


class FixedMover(object):
    """Hand-written ASU table; anything not listed is left as is with ISYM 1."""

    def __init__(self, table=None):
        self.table = dict(table or {})
        self.calls = []

    def move_to_asu(self, hkl):
        self.calls.append(tuple(hkl))
        return self.table.get(tuple(hkl), (tuple(hkl), 1))


class RecordingWriter(object):
    def __init__(self):
        self.written = []

    def write(self, container, path):
        self.written.append((path, container))


def _make_source(tags, rows, category="_refln.", name="r1abcsf", **kwargs):
    loop = ReflectionLoop.from_rows([category + t for t in tags], rows)
    if category == "_diffrn_refln.":
        return ReflectionSource.from_loops(name, diffrn_refln_loop=loop, **kwargs)
    return ReflectionSource.from_loops(name, refln_loop=loop, **kwargs)


@pytest.fixture
def make_source():
    """Build a ReflectionSource from tag suffixes and rows of raw strings."""
    return _make_source


@pytest.fixture
def fixed_mover():
    return FixedMover


@pytest.fixture
def recording_writer():
    return RecordingWriter()


@pytest.fixture
def fp_source():
    return _make_source(
        ["index_h", "index_k", "index_l", "F_meas_au", "F_meas_sigma_au"],
        [["1", "2", "3", "100.0", "5.0"]],
    )


@pytest.fixture
def merged_cif(tmp_path):
    path = tmp_path / "merged.cif"
    path.write_text(MERGED_CIF)
    return str(path)


@pytest.fixture
def two_block_cif(tmp_path):
    path = tmp_path / "two.cif"
    path.write_text(MERGED_CIF + "\n" + UNMERGED_CIF)
    return str(path)


@pytest.fixture
def empty_refln_cif(tmp_path):
    path = tmp_path / "empty.cif"
    path.write_text(EMPTY_REFLN_CIF)
    return str(path)
