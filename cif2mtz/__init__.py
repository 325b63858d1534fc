"""Conversion of SF-mmCIF reflection data to MTZ files."""

from cif2mtz.convert import CifToMtz, nproc
from cif2mtz.errors import (
    BlockNotFound,
    CellValueParseWarning,
    Cif2MtzError,
    ConversionError,
    InvalidSpecField,
    InvalidSpecTable,
    MalformedSpecLine,
    MissingIndexTag,
    NoReflectionLoop,
    SpecError,
    WriteFailure,
)
from cif2mtz.spec import MappingEntry, SpecTable, default_spec_table

__version__ = "0.1.0"
