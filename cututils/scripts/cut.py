#!/usr/bin/env python

"""
Select portions of each line of a file.

Exactly one of *-b*, *-c*, or *-f* gives a comma-separated list of 1-based positions or
inclusive ranges (e.g. ``1,3-5``) selecting bytes, characters, or fields respectively.
Selected units are written in the order the list names them, so ``-c 3,1`` swaps the first
and third characters and ``-c 1,1`` repeats the first.  Positions past the end of a line
are ignored.

In field mode lines are split on *-d* (default TAB) with CSV-style quoting, and selected
fields are joined with *--output-delimiter* (default: the input delimiter).

Settings may also come from a YAML parameter file given with *--param-file*, using the
parameter names *bytes*, *chars*, *fields*, *delimiter*, *output_delimiter*, *output_file*,
*input_files*, and *logging.root_level*.  Command-line values override the file.
"""
import argparse
import logging
import os
import sys
from typing import Any, Dict, Optional, Sequence

from cututils.cut import CutConfig, run
from cututils.logging_utils import configure_logging_from
from cututils.parameters import ParameterError, Parameters, YAMLParametersLoader
from cututils.record_codec import RecordDecodeError

log = logging.getLogger(__name__)  # pylint:disable=invalid-name


def getargs(args: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Get command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Select portions of each line of a file.",
        usage="%(prog)s [-b list | -c list | -f list] [-d delim] "
        "[--output-delimiter delim] [-o file] [file ...]",
    )
    arg = parser.add_argument

    mode_group = parser.add_mutually_exclusive_group()
    mode_group.add_argument("-b", dest="bytes", metavar="LIST", help="Selected bytes")
    mode_group.add_argument("-c", dest="chars", metavar="LIST", help="Selected characters")
    mode_group.add_argument("-f", dest="fields", metavar="LIST", help="Selected fields")

    arg("-d", "--delimiter", help="Input field delimiter (default: TAB)")
    arg(
        "--output-delimiter",
        help="Output field delimiter (defaults to the input delimiter)",
    )
    arg("-o", "--output-file", help="Output file (defaults to standard output)")
    arg("--param-file", help="YAML parameter file providing defaults for the above")
    arg(
        "--log-level",
        help="Logging level (CRITICAL, ERROR, WARNING, INFO, or DEBUG; default WARNING)",
    )
    arg(
        "input_files",
        nargs="*",
        metavar="file",
        help="Input files; '-' or nothing means standard input",
    )

    return parser.parse_args(args)


def params_from_args(args: argparse.Namespace) -> Parameters:
    """
    Combine the parameter file, if any, with values given on the command line.
    """
    if args.param_file:
        params = YAMLParametersLoader().load(args.param_file)
    else:
        params = Parameters.empty()

    from_command_line: Dict[str, Any] = {
        "bytes": args.bytes,
        "chars": args.chars,
        "fields": args.fields,
        "delimiter": args.delimiter,
        "output_delimiter": args.output_delimiter,
        "output_file": args.output_file,
        "input_files": args.input_files or None,
        "logging": {"root_level": args.log_level},
    }
    # a selection on the command line replaces whichever one the parameter file had
    if any(
        from_command_line[mode] is not None for mode in ("bytes", "chars", "fields")
    ):
        params = Parameters.from_mapping(
            {
                k: v
                for (k, v) in params.as_nested_dicts().items()
                if k not in ("bytes", "chars", "fields")
            }
        )
    return params.unify(from_command_line)


def main(args: Optional[Sequence[str]] = None) -> int:
    program_name = os.path.basename(sys.argv[0])
    parsed_args = getargs(args)

    try:
        params = params_from_args(parsed_args)
        configure_logging_from(params)
        config = CutConfig.from_parameters(params)
        failures = run(config)
    except (ParameterError, RecordDecodeError) as e:
        print(f"{program_name}: {e}", file=sys.stderr)
        return 1
    except IOError as e:
        # parameter file loading wraps the real problem
        if e.__cause__ is not None:
            print(f"{program_name}: {e}: {e.__cause__}", file=sys.stderr)
        else:
            print(f"{program_name}: {e}", file=sys.stderr)
        return 1
    if failures:
        log.info("%s input(s) could not be read", failures)
    return 0


if __name__ == "__main__":
    sys.exit(main())
