"""Exceptions raised while converting SF-mmCIF reflection data to MTZ."""


class Cif2MtzError(RuntimeError):
    pass


class SpecError(Cif2MtzError):
    """Problem with the conversion spec (default or user supplied)."""


class MalformedSpecLine(SpecError):
    def __init__(self, line):
        super().__init__(f"line should have 4 words: {line}")
        self.line = line


class InvalidSpecField(SpecError):
    def __init__(self, line):
        super().__init__(f"incorrect line: {line}")
        self.line = line


class InvalidSpecTable(SpecError):
    pass


class ConversionError(Cif2MtzError):
    """Error converting one mmCIF block, fatal for that block only."""


class BlockNotFound(ConversionError):
    def __init__(self, name):
        super().__init__(f"block not found: {name}")
        self.name = name


class NoReflectionLoop(ConversionError):
    def __init__(self, block_name):
        super().__init__(
            f"_refln category not found in mmCIF block: {block_name}"
        )
        self.block_name = block_name


class MissingIndexTag(ConversionError):
    def __init__(self, tag, block_name):
        super().__init__(f"Miller index tag not found: {tag} (block {block_name})")
        self.tag = tag
        self.block_name = block_name


class WriteFailure(Cif2MtzError):
    def __init__(self, path, reason):
        super().__init__(f"failed to write {path}: {reason}")
        self.path = path
        self.reason = reason


class CellValueParseWarning(object):
    """A value in the reflection loop that is not a number.

    Not raised: collected on the container and logged, the cell is
    written as NaN and the conversion carries on."""

    def __init__(self, row, label, tag, value, block=None):
        self.row = row
        self.label = label
        self.tag = tag
        self.value = value
        self.block = block

    def __str__(self):
        where = f"Block {self.block}: value" if self.block else "Value"
        return (
            f"{where} in row {self.row} of {self.tag} (column {self.label}) "
            f"is not a number: {self.value}"
        )

    def __repr__(self):
        return (
            f"CellValueParseWarning({self.row}, {self.label!r}, {self.value!r}, "
            f"block={self.block!r})"
        )
