"""
Convert SF-mmCIF reflection data to MTZ.

Usage:
  cif2mtz [options] CIF_FILE MTZ_FILE
  cif2mtz [options] CIF_FILE --dir=DIRECTORY

First variant: converts the first block of CIF_FILE, or the block specified
with --block=NAME, to MTZ file with given name.

Second variant: converts each block of CIF_FILE to one MTZ file
(block-name.mtz) in the specified DIRECTORY.

If CIF_FILE is -, the input is read from stdin.
"""

import logging
import sys
from argparse import ArgumentParser, RawDescriptionHelpFormatter

import cif2mtz
from cif2mtz.convert import CifToMtz
from cif2mtz.errors import SpecError, WriteFailure
from cif2mtz.source import first_block, get_block_by_name, read_refln_sources
from cif2mtz.spec import format_spec, read_spec_file

logger = logging.getLogger("cif2mtz")

EXIT_OK = 0
EXIT_CONVERSION_ERROR = 1
EXIT_SPEC_ERROR = 2
EXIT_WRITE_ERROR = 3


def make_parser():
    parser = ArgumentParser(
        prog="cif2mtz",
        description=__doc__,
        formatter_class=RawDescriptionHelpFormatter,
    )
    parser.add_argument("paths", metavar="FILE", nargs="*", help="CIF_FILE [MTZ_FILE]")
    parser.add_argument(
        "-V", "--version", action="version", version=f"%(prog)s {cif2mtz.__version__}"
    )
    parser.add_argument(
        "-v", "--verbose", help="verbose output", action="store_true"
    )
    parser.add_argument("-b", "--block", metavar="NAME", help="mmCIF block to convert")
    parser.add_argument("-d", "--dir", metavar="DIR", help="output directory")
    parser.add_argument("--spec", metavar="FILE", help="conversion spec")
    parser.add_argument(
        "--print-spec", action="store_true", help="print default spec and exit"
    )
    parser.add_argument("--title", help="MTZ title")
    parser.add_argument(
        "-H",
        "--history",
        metavar="LINE",
        action="append",
        default=[],
        help="add a history line (can be repeated)",
    )
    parser.add_argument(
        "-u", "--unmerged", action="store_true", help="write unmerged MTZ file(s)"
    )
    parser.add_argument(
        "-j",
        "--nproc",
        type=int,
        default=1,
        help="number of blocks converted in parallel with --dir",
    )
    return parser


def run(args=None):
    parser = make_parser()
    params = parser.parse_args(args)

    logging.basicConfig(
        format="%(message)s", level=logging.DEBUG if params.verbose else logging.INFO
    )

    if params.print_spec:
        sys.stdout.write(format_spec())
        return EXIT_OK

    convert_all = params.dir is not None
    if len(params.paths) != (1 if convert_all else 2):
        parser.error(
            "expected CIF_FILE --dir=DIRECTORY" if convert_all else "expected CIF_FILE MTZ_FILE"
        )

    spec_table = None
    if params.spec:
        try:
            spec_table = read_spec_file(params.spec)
        except SpecError as e:
            logger.error(f"Problem with spec: {e}")
            return EXIT_SPEC_ERROR

    converter = CifToMtz(
        spec_table=spec_table,
        title=params.title,
        history=params.history,
        force_unmerged=params.unmerged,
    )

    cif_path = params.paths[0]
    try:
        sources = read_refln_sources(cif_path)
        if convert_all:
            results = converter.convert_all(
                sources, params.dir, nproc=max(1, min(params.nproc, cif2mtz.nproc()))
            )
            errors = [e for _, _, e in results if e is not None]
            if any(isinstance(e, WriteFailure) for e in errors):
                return EXIT_WRITE_ERROR
            if errors:
                return EXIT_CONVERSION_ERROR
        else:
            if params.block:
                source = get_block_by_name(sources, params.block)
            else:
                source = first_block(sources, cif_path)
            converter.convert_block_to_mtz(source, params.paths[1])
    except WriteFailure as e:
        logger.error(f"ERROR: {e}")
        return EXIT_WRITE_ERROR
    except (RuntimeError, ValueError) as e:
        logger.error(f"ERROR: {e}")
        return EXIT_CONVERSION_ERROR
    logger.debug("Done.")
    return EXIT_OK


def main():
    sys.exit(run())


if __name__ == "__main__":
    main()
