"""In-memory MTZ content: metadata, columns and the reflection data matrix."""

import logging

import numpy as np

from cif2mtz.resolve import ResolvedColumn

logger = logging.getLogger(__name__)

# columns added after H, K, L for unmerged data
ISYM_LABEL = "M/ISYM"
BATCH_LABEL = "BATCH"
BATCH_NUMBER = 1


class Dataset(object):
    def __init__(self, id, name, wavelength=0.0):
        self.id = id
        self.name = name
        self.wavelength = wavelength

    def __repr__(self):
        return f"Dataset({self.id}, {self.name!r}, wavelength={self.wavelength})"


class Batch(object):
    """The single batch header written for unmerged data."""

    def __init__(self, number, dataset_id, cell):
        self.number = number
        self.dataset_id = dataset_id
        self.cell = cell


class DestinationContainer(object):
    def __init__(self, cell=None, spacegroup=None):
        self.title = ""
        self.history = []
        self.cell = cell
        self.spacegroup = spacegroup
        self.datasets = []
        self.columns = []
        self.batches = []
        self.nreflections = 0
        self.data = np.zeros(0, dtype=np.float32)
        self.diagnostics = []

    def add_dataset(self, name, wavelength=0.0):
        ds = Dataset(len(self.datasets), name, wavelength)
        self.datasets.append(ds)
        return ds

    def column_labels(self):
        return [col.label for col in self.columns]

    def column_types(self):
        return "".join(col.type for col in self.columns)

    def column(self, label):
        for col in self.columns:
            if col.label == label:
                return col
        raise KeyError(label)

    def column_data(self, label):
        return self.as_matrix()[:, self.column(label).idx]

    def as_matrix(self):
        """(nreflections, ncolumns) view of the data."""
        return self.data.reshape(self.nreflections, len(self.columns))


def build_container(source, resolution, title=None, history=()):
    """Set up the MTZ metadata and a zeroed data matrix for one block.

    The resolved columns are copied, so the resolution stays usable for
    reading values in its own (non-synthetic) column order."""

    container = DestinationContainer(cell=source.cell, spacegroup=source.spacegroup)
    if title:
        container.title = title
    container.history.extend(history)
    container.add_dataset("HKL_base")
    container.add_dataset("unknown", source.wavelength)

    columns = [
        ResolvedColumn(col.dataset_id, col.type, col.label, col.source_index)
        for col in resolution.columns
    ]
    if resolution.unmerged:
        logger.debug(f"Adding columns {ISYM_LABEL} and {BATCH_LABEL} for unmerged data...")
        columns.insert(3, ResolvedColumn(1, "Y", ISYM_LABEL))
        columns.insert(4, ResolvedColumn(1, "B", BATCH_LABEL))
        container.batches.append(Batch(BATCH_NUMBER, 1, source.cell))

    for i, col in enumerate(columns):
        col.parent = container
        col.idx = i
    container.columns = columns

    container.nreflections = resolution.loop.length()
    container.data = np.zeros(len(columns) * container.nreflections, dtype=np.float32)
    return container
