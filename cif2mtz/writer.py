"""Write a DestinationContainer as an MTZ file with gemmi."""

import logging
import os

import gemmi
import numpy as np

from cif2mtz.errors import WriteFailure

logger = logging.getLogger(__name__)


def to_gemmi(container):
    """Create a gemmi.Mtz holding the metadata and data of the container."""
    mtz = gemmi.Mtz(with_base=False)
    mtz.title = container.title
    mtz.history = list(container.history)
    if container.cell is not None:
        mtz.cell = container.cell
    if container.spacegroup is not None:
        mtz.spacegroup = container.spacegroup
    for ds in container.datasets:
        added = mtz.add_dataset(ds.name)
        added.wavelength = ds.wavelength
    for col in container.columns:
        mtz.add_column(col.label, col.type, dataset_id=col.dataset_id)
    for b in container.batches:
        batch = gemmi.Mtz.Batch()
        batch.number = b.number
        if b.cell is not None:
            batch.cell = b.cell
        batch.dataset_id = b.dataset_id
        mtz.batches.append(batch)
    matrix = np.ascontiguousarray(container.as_matrix(), dtype=np.float32)
    mtz.set_data(matrix)
    if container.cell is not None and container.nreflections:
        mtz.update_reso()
    return mtz


class MtzWriter(object):
    """Writes the whole file or nothing.

    The MTZ goes to a temporary file next to the destination and is renamed
    once complete."""

    def write(self, container, path):
        logger.debug(f"Writing {path} ...")
        directory, name = os.path.split(os.path.abspath(path))
        tmp_path = os.path.join(directory, f".{name}.part")
        try:
            mtz = to_gemmi(container)
            mtz.write_to_file(tmp_path)
            os.replace(tmp_path, path)
        except (RuntimeError, ValueError, OSError) as e:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise WriteFailure(path, e)
