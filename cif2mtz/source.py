"""Reflection data read from SF-mmCIF blocks.

gemmi does the parsing; here each block is reduced to the one reflection
loop that will be converted (merged _refln preferred, _diffrn_refln
otherwise) together with the cell, space group and wavelength."""

import logging
import sys

import gemmi
from gemmi import cif

from cif2mtz.errors import BlockNotFound, ConversionError

logger = logging.getLogger(__name__)

MERGED_CATEGORY = "_refln."
UNMERGED_CATEGORY = "_diffrn_refln."


class ReflectionLoop(object):
    """Tags and row-major raw string values of one mmCIF loop."""

    def __init__(self, tags, values):
        self.tags = list(tags)
        self.values = list(values)
        if not self.tags:
            raise ValueError("loop without tags")
        if len(self.values) % len(self.tags):
            raise ValueError(
                f"{len(self.values)} values do not fill rows of {len(self.tags)} tags"
            )
        self._lookup = {}
        for i, tag in enumerate(self.tags):
            self._lookup.setdefault(tag.lower(), i)

    @classmethod
    def from_rows(cls, tags, rows):
        values = []
        for row in rows:
            values.extend(row)
        return cls(tags, values)

    @classmethod
    def from_table(cls, table):
        """From a gemmi.cif.Table (loop or key-value pairs)."""
        tags = list(table.tags)
        width = len(tags)
        values = []
        for row in table:
            values.extend(row[j] for j in range(width))
        return cls(tags, values)

    def find_tag(self, tag):
        return self._lookup.get(tag.lower(), -1)

    def width(self):
        return len(self.tags)

    def length(self):
        return len(self.values) // len(self.tags)

    def row(self, n):
        w = len(self.tags)
        return self.values[n * w : (n + 1) * w]

    def prefix(self):
        tag = self.tags[0]
        return tag[: tag.find(".") + 1]


class ReflectionSource(object):
    """One mmCIF block, with the reflection loop chosen for conversion.

    unmerged is True when only _diffrn_refln was found; the loop is None if
    the block has neither category."""

    def __init__(
        self,
        name,
        loop,
        unmerged=False,
        cell=None,
        spacegroup=None,
        wavelength=0.0,
        entry_id="",
    ):
        self.name = name
        self.loop = loop
        self.unmerged = unmerged
        self.cell = cell
        self.spacegroup = spacegroup
        self.wavelength = wavelength
        self.entry_id = entry_id

    @classmethod
    def from_loops(cls, name, refln_loop=None, diffrn_refln_loop=None, **kwargs):
        if refln_loop is not None:
            return cls(name, refln_loop, unmerged=False, **kwargs)
        if diffrn_refln_loop is not None:
            return cls(name, diffrn_refln_loop, unmerged=True, **kwargs)
        return cls(name, None, **kwargs)

    @classmethod
    def from_refln_block(cls, rb):
        block = rb.block
        loops = {}
        for category in (MERGED_CATEGORY, UNMERGED_CATEGORY):
            table = block.find_mmcif_category(category)
            # a loop with tags and no rows is still a (zero-reflection) loop
            if bool(table) and list(table.tags):
                loops[category] = ReflectionLoop.from_table(table)
        return cls.from_loops(
            block.name,
            refln_loop=loops.get(MERGED_CATEGORY),
            diffrn_refln_loop=loops.get(UNMERGED_CATEGORY),
            cell=rb.cell,
            spacegroup=rb.spacegroup,
            wavelength=rb.wavelength,
            entry_id=rb.entry_id,
        )

    def __repr__(self):
        kind = "none" if self.loop is None else "unmerged" if self.unmerged else "merged"
        return f"<ReflectionSource {self.name} ({kind})>"


def read_document(path):
    """Parse a (possibly gzipped) mmCIF file; - reads standard input."""
    logger.debug(f"Reading {path} ...")
    try:
        if path == "-":
            return cif.read_string(sys.stdin.read())
        return cif.read(path)
    except (RuntimeError, ValueError, OSError) as e:
        raise ConversionError(f"cannot read {path}: {e}")


def read_refln_sources(path):
    doc = read_document(path)
    return [ReflectionSource.from_refln_block(rb) for rb in gemmi.as_refln_blocks(doc)]


def get_block_by_name(sources, name):
    for source in sources:
        if source.name == name:
            return source
    raise BlockNotFound(name)


def first_block(sources, path="input"):
    if not sources:
        raise ConversionError(f"no data blocks in {path}")
    return sources[0]
