"""Match the spec table against the tags of one reflection loop."""

import logging

from cif2mtz.errors import MissingIndexTag, NoReflectionLoop

logger = logging.getLogger(__name__)


class ResolvedColumn(object):
    """An MTZ column and the loop position of its mmCIF values.

    parent and idx are set when the column is attached to a container;
    source_index is None for the columns added for unmerged data."""

    def __init__(self, dataset_id, type, label, source_index=None):
        self.dataset_id = dataset_id
        self.type = type
        self.label = label
        self.source_index = source_index
        self.parent = None
        self.idx = None

    def __repr__(self):
        return f"ResolvedColumn({self.label!r}, {self.type!r}, dataset={self.dataset_id})"


class Resolution(object):
    def __init__(self, loop, unmerged):
        self.loop = loop
        self.unmerged = unmerged
        self.columns = []
        self.tags = []
        self.status_index = None

    @property
    def indices(self):
        return [col.source_index for col in self.columns]

    @property
    def uses_status(self):
        return self.status_index is not None

    @property
    def labels(self):
        return [col.label for col in self.columns]


def resolve_columns(source, spec_table, force_unmerged=False):
    """Find the spec entries present in the reflection loop of source.

    Returns a Resolution with the columns in spec order. The first tag found
    among consecutive entries for the same label wins; a missing Miller
    index tag is an error."""

    loop = source.loop
    if loop is None:
        raise NoReflectionLoop(source.name)

    prefix = loop.prefix()
    unmerged = force_unmerged or source.unmerged
    resolution = Resolution(loop, unmerged)

    logger.debug("Searching tags with known MTZ equivalents ...")
    last_label = None
    for entry in spec_table:
        tag = prefix + entry.source_tag
        index = loop.find_tag(tag)
        if index == -1:
            if entry.dest_type == "H":
                raise MissingIndexTag(tag, source.name)
            continue
        if entry.dest_label == last_label:
            continue
        # Some early unmerged depositions (e.g. 1vly) have data in _refln
        # together with _refln.status, which is always 'o'.
        if unmerged and entry.dest_type == "s":
            continue
        col_type = entry.dest_type
        if col_type == "s":
            col_type = "I"
            resolution.status_index = len(resolution.columns)
        resolution.columns.append(
            ResolvedColumn(entry.dataset_id, col_type, entry.dest_label, index)
        )
        resolution.tags.append(tag)
        last_label = entry.dest_label
        logger.debug(f"  {tag} -> {entry.dest_label}")
    return resolution
