"""Fill the MTZ data matrix from the raw strings of the reflection loop."""

import logging
import math

from gemmi import cif

from cif2mtz.container import BATCH_NUMBER
from cif2mtz.errors import CellValueParseWarning, ConversionError

logger = logging.getLogger(__name__)


def status_to_flag(value):
    """_refln.status as free-R flag: o (work set) -> 1, f (free set) -> 0."""
    c = value[:1]
    if c in ("'", '"'):
        c = value[1:2]
    if c == "o":
        return 1.0
    if c == "f":
        return 0.0
    return math.nan


def cell_to_float(value):
    """Number in a CIF value, NaN for ? and . as well as for non-numbers."""
    if cif.is_null(value):
        return math.nan
    return cif.as_number(value)


def miller_index(value, row, tag):
    try:
        return cif.as_int(value)
    except (RuntimeError, ValueError):
        raise ConversionError(f"Miller index in row {row} of {tag} is not an integer: {value}")


def materialize(container, resolution, mover=None, block_name=None):
    """Write every row of the reflection loop into container.data.

    For unmerged data the indices go through mover.move_to_asu() and are
    followed by ISYM and the batch number. block_name only labels the
    warnings for values that are not numbers."""

    loop = resolution.loop
    columns = resolution.columns
    indices = resolution.indices
    width = loop.width()
    values = loop.values
    ncol = len(container.columns)
    if len(container.data) != ncol * container.nreflections:
        raise ConversionError("data array does not match the column count")
    if resolution.unmerged and mover is None:
        raise ConversionError("unmerged data needs a symmetry mover")

    data = container.data
    k = 0
    for row in range(container.nreflections):
        start = row * width
        hkl = tuple(
            miller_index(values[start + indices[j]], row, resolution.tags[j])
            for j in range(3)
        )
        if resolution.unmerged:
            hkl, isym = mover.move_to_asu(hkl)
            data[k : k + 3] = hkl
            data[k + 3] = isym
            data[k + 4] = BATCH_NUMBER
            k += 5
        else:
            data[k : k + 3] = hkl
            k += 3
        for j in range(3, len(columns)):
            v = values[start + indices[j]]
            if j == resolution.status_index:
                data[k] = status_to_flag(v)
            else:
                x = cell_to_float(v)
                data[k] = x
                if math.isnan(x) and not cif.is_null(v):
                    warning = CellValueParseWarning(
                        row, columns[j].label, resolution.tags[j], v, block_name
                    )
                    container.diagnostics.append(warning)
                    logger.warning(str(warning))
            k += 1
    return container
