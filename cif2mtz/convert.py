"""Conversion of SF-mmCIF reflection blocks to MTZ files."""

import concurrent.futures
import logging
import os

from cif2mtz.container import build_container
from cif2mtz.materialize import materialize
from cif2mtz.resolve import resolve_columns
from cif2mtz.spec import default_spec_table
from cif2mtz.symmetry import HklMover
from cif2mtz.writer import MtzWriter

logger = logging.getLogger(__name__)


def nproc():
    try:
        return int(os.environ.get("NSLOTS"))
    except (ValueError, TypeError):
        pass

    return os.cpu_count() or 1


class CifToMtz(object):
    """Settings for one run and the per-block conversion pipeline.

    writer needs a write(container, path) method and mover_factory is called
    with the space group to get an object with move_to_asu(hkl); both can be
    replaced, e.g. in tests."""

    def __init__(
        self,
        spec_table=None,
        title=None,
        history=(),
        force_unmerged=False,
        writer=None,
        mover_factory=HklMover,
    ):
        self.spec_table = spec_table if spec_table is not None else default_spec_table()
        self.title = title
        self.history = list(history)
        self.force_unmerged = force_unmerged
        self.writer = writer if writer is not None else MtzWriter()
        self.mover_factory = mover_factory

    def make_container(self, source):
        """Resolve, allocate and fill the MTZ content for one block."""
        resolution = resolve_columns(
            source, self.spec_table, force_unmerged=self.force_unmerged
        )
        container = build_container(
            source, resolution, title=self.title, history=self.history
        )
        mover = None
        if resolution.unmerged:
            mover = self.mover_factory(source.spacegroup)
        return materialize(container, resolution, mover, block_name=source.name)

    def convert_block_to_mtz(self, source, mtz_path):
        container = self.make_container(source)
        self.writer.write(container, mtz_path)
        return container

    def output_path(self, source, directory):
        return os.path.join(directory, source.name + ".mtz")

    def convert_all(self, sources, directory, nproc=1):
        """Convert each block to <directory>/<block-name>.mtz.

        A failing block is logged and does not stop the others. Returns a
        list of (block name, path, exception or None) in input order."""

        def job(source):
            path = self.output_path(source, directory)
            try:
                self.convert_block_to_mtz(source, path)
            except (RuntimeError, ValueError) as e:
                logger.error(f"ERROR: block {source.name}: {e}")
                return source.name, path, e
            return source.name, path, None

        if nproc > 1 and len(sources) > 1:
            with concurrent.futures.ThreadPoolExecutor(max_workers=nproc) as pool:
                return list(pool.map(job, sources))
        return [job(source) for source in sources]
