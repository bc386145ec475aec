import io
import sys
from abc import ABCMeta, abstractmethod
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO, ContextManager, Iterator, Optional, TextIO, Union

from attr import attrib, attrs, validators

STDIN_NAME = "-"


class LineSource(metaclass=ABCMeta):
    """
    Something which can provide lines of raw bytes.

    This abstracts over whether the lines are coming from a filesystem path, standard input,
    or an in-memory string.  This should be viewed as more analogous to a `Path` object than
    to a file: nothing is opened until `open` or `lines` is called.

    This is inspired by Guava's `ByteSource`.
    """

    @abstractmethod
    def open(self) -> ContextManager[BinaryIO]:
        """
        Get a context manager providing a binary file-like object reading from this source.
        """
        raise NotImplementedError()

    @property
    @abstractmethod
    def name(self) -> str:
        """
        A human-readable name for this source, used in error messages.
        """
        raise NotImplementedError()

    def lines(self) -> Iterator[bytes]:
        """
        Get the lines of this source with their ``\\n`` or ``\\r\\n`` terminators removed.

        The source is opened when iteration starts and closed when it finishes.
        """
        with self.open() as inp:
            yield from iter_lines(inp)

    @staticmethod
    def from_file(p: Union[str, Path]) -> "LineSource":
        """
        Get a source whose lines are those of the given file.
        """
        return _FileLineSource(Path(p))

    @staticmethod
    def from_stdin() -> "LineSource":
        """
        Get a source reading from standard input.

        Standard input is not closed when the source is.
        """
        return _StdinLineSource()

    @staticmethod
    def from_string(s: Union[str, bytes], *, name: str = "<string>") -> "LineSource":
        """
        Get a source whose content is the given string, UTF-8 encoded if not already bytes.
        """
        return _StringLineSource(s.encode("utf-8") if isinstance(s, str) else s, name)

    @staticmethod
    def from_name(name: str) -> "LineSource":
        """
        Get a source for a command-line input name, where ``-`` means standard input.
        """
        if name == STDIN_NAME:
            return LineSource.from_stdin()
        return LineSource.from_file(name)


@attrs(slots=True, frozen=True)
class _FileLineSource(LineSource):
    _path: Path = attrib(validator=validators.instance_of(Path))

    def open(self) -> ContextManager[BinaryIO]:
        return open(self._path, "rb")

    @property
    def name(self) -> str:
        return str(self._path)


class _StdinLineSource(LineSource):
    @contextmanager
    def open(self) -> Iterator[BinaryIO]:  # type: ignore
        yield sys.stdin.buffer

    @property
    def name(self) -> str:
        return STDIN_NAME


@attrs(slots=True, frozen=True)
class _StringLineSource(LineSource):
    _bytes: bytes = attrib(validator=validators.instance_of(bytes))
    _name: str = attrib(validator=validators.instance_of(str))

    def open(self) -> ContextManager[BinaryIO]:
        return io.BytesIO(self._bytes)

    @property
    def name(self) -> str:
        return self._name

    def __repr__(self) -> str:
        if len(self._bytes) > 100:
            s = self._bytes[:100] + b"..."
        else:
            s = self._bytes
        return f"_StringLineSource({s!r})"


class CharSink(metaclass=ABCMeta):
    """
    Something which can accept string data.

    This abstracts over whether the string data is being written to a filesystem path,
    standard output, or a string buffer.

    You can get a file-like object from this by using `open` with a context manager.

    This is inspired by Guava's `CharSink`.
    """

    @abstractmethod
    def open(self) -> ContextManager[TextIO]:
        """
        Get a context manager providing a file-like object which writes to this sink.
        """
        raise NotImplementedError()

    @staticmethod
    def to_file(p: Union[Path, str]) -> "CharSink":
        """
        Get a sink which writes to the given path.

        UTF-8 encoding will be used.  Missing parent directories are created.
        """
        if isinstance(p, str):
            p = Path(p)
        if p.parent:
            p.parent.mkdir(parents=True, exist_ok=True)
        return _FileCharSink(p)

    @staticmethod
    def to_stdout() -> "CharSink":
        """
        Get a sink which writes to standard output.

        Standard output is flushed but not closed when the sink is.
        """
        return _StdoutCharSink()

    @staticmethod
    def to_string() -> "StringCharSink":
        """
        Gets a sink which writes to a string buffer.

        See 'StringCharSink' for how to retrieve what has been written.
        """
        return StringCharSink()

    @staticmethod
    def to_file_or_stdout(p: Optional[Union[Path, str]]) -> "CharSink":
        return CharSink.to_file(p) if p is not None else CharSink.to_stdout()

    def write(self, data: str) -> None:
        """
        Write the given data to the sink.

        Note that if you `write` twice, the second `write` will overwrite the first for
        file-backed sinks.  If you wish to write incrementally, use `open`.
        """
        with self.open() as out:
            out.write(data)


class StringCharSink(CharSink):
    """
    A sink which writes to a string buffer.

    The last string written can be recovered from the 'last_string_written' field.
    """

    def __init__(self):
        self.last_string_written: Optional[str] = None

    def open(self) -> ContextManager[TextIO]:
        outer_self = self

        class StringFileLike(io.StringIO):
            def __exit__(self, exc_type, exc_val, exc_tb):
                outer_self.last_string_written = self.getvalue()
                super().__exit__(exc_type, exc_val, exc_tb)

        return StringFileLike()


@attrs(slots=True, frozen=True)
class _FileCharSink(CharSink):
    _path: Path = attrib(validator=validators.instance_of(Path))

    def open(self) -> ContextManager[TextIO]:
        return self._path.open(mode="w", encoding="utf-8")


class _StdoutCharSink(CharSink):
    @contextmanager
    def open(self) -> Iterator[TextIO]:  # type: ignore
        try:
            yield sys.stdout
        finally:
            sys.stdout.flush()


def iter_lines(inp: BinaryIO) -> Iterator[bytes]:
    """
    Iterate over the lines of an open binary file with ``\\n`` or ``\\r\\n`` terminators removed.
    """
    for line in inp:
        if line.endswith(b"\n"):
            line = line[:-1]
            if line.endswith(b"\r"):
                line = line[:-1]
        yield line
