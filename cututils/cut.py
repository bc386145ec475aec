"""
Selecting portions of each line of a set of inputs.

`CutConfig` gathers what to cut (a `Selection`), where from, and how to split and re-join
fields.  `run` applies it to every line of every input in turn.
"""
import logging
import sys
from contextlib import ExitStack
from pathlib import Path
from typing import Iterable, Optional, TextIO, Tuple

from attr import attrib, attrs, validators

from immutablecollections.converter_utils import _to_tuple

from cututils.extraction import Selection, SelectionMode
from cututils.io_utils import STDIN_NAME, CharSink, LineSource, iter_lines
from cututils.parameters import ParameterError, Parameters
from cututils.preconditions import check_all_isinstance, check_arg
from cututils.record_codec import TAB, DelimitedRecordCodec, RecordDecodeError

log = logging.getLogger(__name__)  # pylint:disable=invalid-name

INPUT_FILES_PARAM = "input_files"
DELIMITER_PARAM = "delimiter"
OUTPUT_DELIMITER_PARAM = "output_delimiter"
OUTPUT_FILE_PARAM = "output_file"
SELECTION_PARAMS = tuple(mode.value for mode in SelectionMode)


@attrs(frozen=True, slots=True)
class CutConfig:
    """
    Everything needed to run a cut over a set of inputs.

    *input_files* are names as given on a command line, where ``-`` is standard input.
    Output goes to *output_file* if given, otherwise to standard output.
    """

    selection: Selection = attrib(validator=validators.instance_of(Selection))
    input_files: Tuple[str, ...] = attrib(converter=_to_tuple, default=(STDIN_NAME,))
    codec: DelimitedRecordCodec = attrib(
        validator=validators.instance_of(DelimitedRecordCodec),
        factory=DelimitedRecordCodec,
    )
    output_file: Optional[Path] = attrib(
        validator=validators.optional(validators.instance_of(Path)), default=None
    )

    def __attrs_post_init__(self) -> None:
        check_arg(self.input_files, "At least one input must be given")
        check_all_isinstance(self.input_files, str)

    @staticmethod
    def from_parameters(params: Parameters) -> "CutConfig":
        """
        Build a `CutConfig` from parameters.

        Exactly one of *bytes*, *chars*, or *fields* must hold a selection list.
        *delimiter* (default TAB) and *output_delimiter* (default: the delimiter) must be
        single bytes.  *input_files* is a list of input names defaulting to standard input,
        and *output_file*, if present, is where output is written.
        """
        params.assert_exactly_one_present(SELECTION_PARAMS)
        (mode,) = [mode for mode in SelectionMode if mode.value in params]
        selection = Selection(mode, params.position_list(mode.value))

        delimiter = params.single_byte(DELIMITER_PARAM, default=TAB)
        if OUTPUT_DELIMITER_PARAM in params:
            output_delimiter: Optional[str] = params.single_byte(OUTPUT_DELIMITER_PARAM)
        else:
            output_delimiter = None

        input_files = params.arbitrary_list(INPUT_FILES_PARAM, default=[STDIN_NAME])
        if not input_files:
            input_files = [STDIN_NAME]
        bad_inputs = [x for x in input_files if not isinstance(x, str)]
        if bad_inputs:
            raise ParameterError(f"Expected input file names but got {bad_inputs}")

        return CutConfig(
            selection=selection,
            input_files=input_files,
            codec=DelimitedRecordCodec(delimiter, output_delimiter=output_delimiter),
            output_file=params.optional_creatable_file(OUTPUT_FILE_PARAM),
        )

    def sources(self) -> Tuple[LineSource, ...]:
        return tuple(LineSource.from_name(name) for name in self.input_files)


def run(
    config: CutConfig,
    *,
    sources: Optional[Iterable[LineSource]] = None,
    sink: Optional[CharSink] = None,
    error_stream: Optional[TextIO] = None,
) -> int:
    """
    Cut every line of every input according to *config*.

    *sources* and *sink* default to those named by *config*.  An input which cannot be opened
    is reported to *error_stream* (default standard error) as ``<name>: <reason>`` and skipped.

    Returns the number of inputs which could not be opened.  A malformed delimited line
    raises a `RecordDecodeError`.
    """
    if sources is None:
        sources = config.sources()
    if sink is None:
        sink = CharSink.to_file_or_stdout(config.output_file)
    if error_stream is None:
        error_stream = sys.stderr

    log.debug("Cutting %s", config.selection)
    failures = 0
    with sink.open() as out:
        for source in sources:
            with ExitStack() as exit_stack:
                try:
                    inp = exit_stack.enter_context(source.open())
                except OSError as e:
                    reason = e.strerror or str(e)
                    print(f"{source.name}: {reason}", file=error_stream)
                    log.warning("Skipping input %s: %s", source.name, reason)
                    failures += 1
                    continue
                _cut_lines(source.name, iter_lines(inp), config, out)
    return failures


def _cut_lines(
    source_name: str, lines: Iterable[bytes], config: CutConfig, out: TextIO
) -> None:
    selection = config.selection
    codec = config.codec
    for (line_num, line) in enumerate(lines, start=1):
        if selection.mode is SelectionMode.BYTES:
            out.write(selection.extract(line))
        else:
            text = line.decode("utf-8", errors="replace")
            if selection.mode is SelectionMode.CHARS:
                out.write(selection.extract(text))
            else:
                try:
                    record = codec.decode(text)
                except RecordDecodeError as e:
                    raise RecordDecodeError(f"{source_name}:{line_num}: {e}") from e
                out.write(codec.encode(selection.extract(record)))
        out.write("\n")
