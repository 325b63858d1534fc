"""Conversion spec: which mmCIF tags become which MTZ columns.

Each line of a spec has four words:

    tag label type dataset

where tag is given without the category (the same spec serves _refln and
_diffrn_refln), label and type describe the MTZ column and dataset is 0 or
1. Alternative tags for the same MTZ label are written on consecutive lines
and the first one present in the mmCIF block is used.
"""

import functools
from collections import namedtuple

from cif2mtz.errors import (
    InvalidSpecField,
    InvalidSpecTable,
    MalformedSpecLine,
    SpecError,
)

# MTZ column types, plus 's' for _refln.status converted to a free-R flag
COLUMN_TYPES = "HIJQKMFGLDPWAYBs"

DEFAULT_SPEC = (
    "index_h H H 0",
    "index_k K H 0",
    "index_l L H 0",
    "pdbx_r_free_flag FreeR_flag I 0",
    "status FreeR_flag s 0",
    "intensity_meas I J 1",
    "intensity_net I J 1",
    "intensity_sigma SIGI Q 1",
    "pdbx_I_plus I(+) K 1",
    "pdbx_I_plus_sigma SIGI(+) M 1",
    "pdbx_I_minus I(-) K 1",
    "pdbx_I_minus_sigma SIGI(-) M 1",
    "F_meas_au FP F 1",
    "F_meas_sigma_au SIGFP Q 1",
    "pdbx_F_plus F(+) G 1",
    "pdbx_F_plus_sigma SIGF(+) L 1",
    "pdbx_F_minus F(-) G 1",
    "pdbx_F_minus_sigma SIGF(-) L 1",
    "pdbx_anom_difference DP D 1",
    "pdbx_anom_difference_sigma SIGDP Q 1",
    "F_calc FC F 1",
    "phase_calc PHIC P 1",
    "fom FOM W 1",
    "weight FOM W 1",
    "pdbx_HL_A_iso HLA A 1",
    "pdbx_HL_B_iso HLB A 1",
    "pdbx_HL_C_iso HLC A 1",
    "pdbx_HL_D_iso HLD A 1",
    "pdbx_FWT FWT F 1",
    "pdbx_PHWT PHWT P 1",
    "pdbx_DELFWT DELFWT F 1",
    "pdbx_DELPHWT DELPHWT P 1",
)

SPEC_HEADER = (
    "# Each line in the spec contains four words:",
    "# - tag (without category) from _refln or _diffrn_refln",
    "# - MTZ column label",
    "# - MTZ column type",
    "# - MTZ dataset for the column (must be 0 or 1)",
)


MappingEntry = namedtuple(
    "MappingEntry", ["source_tag", "dest_label", "dest_type", "dataset_id"]
)


def parse_spec_line(line):
    tokens = line.split()
    if len(tokens) != 4:
        raise MalformedSpecLine(line)
    tag, label, col_type, dataset = tokens
    if len(col_type) != 1 or col_type not in COLUMN_TYPES:
        raise InvalidSpecField(line)
    if dataset not in ("0", "1"):
        raise InvalidSpecField(line)
    return MappingEntry(tag, label, col_type, int(dataset))


class SpecTable(tuple):
    """Immutable, ordered sequence of MappingEntry.

    The Miller indices come first and all alternatives for one label are
    adjacent; both are checked here so that the resolver can rely on them."""

    def __new__(cls, entries):
        entries = tuple(entries)
        cls._check(entries)
        return super().__new__(cls, entries)

    @staticmethod
    def _check(entries):
        seen = set()
        previous = None
        for entry in entries:
            if entry.dest_label != previous:
                if entry.dest_label in seen:
                    raise InvalidSpecTable(
                        f"alternatives for {entry.dest_label} are not on "
                        f"consecutive lines (at tag {entry.source_tag})"
                    )
                seen.add(entry.dest_label)
                previous = entry.dest_label

        index_labels = []
        in_indices = True
        for entry in entries:
            if entry.dest_type == "H":
                if not in_indices:
                    raise InvalidSpecTable(
                        f"Miller index tag {entry.source_tag} must precede "
                        "all other tags"
                    )
                if entry.dest_label not in index_labels:
                    index_labels.append(entry.dest_label)
            else:
                in_indices = False
        if len(index_labels) != 3:
            raise InvalidSpecTable(
                "spec must start with the three Miller index columns, got: "
                + " ".join(index_labels)
            )

    def labels(self):
        result = []
        for entry in self:
            if not result or result[-1] != entry.dest_label:
                result.append(entry.dest_label)
        return result


def read_spec_lines(lines):
    """Parse spec lines, skipping blank lines and # comments."""
    entries = []
    for line in lines:
        line = line.rstrip("\r\n")
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        entries.append(parse_spec_line(line))
    return SpecTable(entries)


def read_spec_file(path):
    try:
        with open(path) as f:
            return read_spec_lines(f)
    except OSError as e:
        raise SpecError(f"cannot read spec file {path}: {e}")


@functools.lru_cache(maxsize=None)
def default_spec_table():
    return read_spec_lines(DEFAULT_SPEC)


def format_spec(table=None):
    """Text printed by --print-spec."""
    if table is None:
        lines = list(DEFAULT_SPEC)
    else:
        lines = [
            f"{e.source_tag} {e.dest_label} {e.dest_type} {e.dataset_id}"
            for e in table
        ]
    return "\n".join(SPEC_HEADER + tuple(lines)) + "\n"
