import logging
from pathlib import Path
from typing import (
    Any,
    Dict,
    Iterable,
    List,
    Mapping,
    Optional,
    Sequence,
    Tuple,
    Type,
    TypeVar,
    Union,
)

from attr import attrib, attrs

from immutablecollections import ImmutableDict, immutabledict
from immutablecollections.converter_utils import _to_tuple

from cututils.io_utils import CharSink
from cututils.positions import PositionList
from cututils.preconditions import check_arg, check_isinstance
from cututils.range_spec import PositionListError, parse_position_list
from cututils.record_codec import parse_delimiter

import yaml

_logger = logging.getLogger(__name__)  # pylint:disable=invalid-name


class ParameterError(Exception):
    pass


_ParamType = TypeVar("_ParamType")  # pylint:disable=invalid-name


@attrs(frozen=True, slots=True)
class Parameters:
    """
    Configuration parameters for a program.

    A `Parameters` object can be thought of as a hierarchical dictionary mapping parameter name
    strings to arbitrary values.  Hierarchical levels within a parameter name are indicated
    via `.`; the levels are called namespaces. So `logging.root_level` means "look up the
    'root_level' parameter within the 'logging' namespace".

    Typed accessors validate values as they are looked up, so configuration mistakes surface
    as a `ParameterError` before any input is processed.

    You can check if a lookup of a parameter would be successful using the `in` operator.
    """

    _data: ImmutableDict[str, Any] = attrib(
        default=immutabledict(), converter=immutabledict
    )
    namespace_prefix: Tuple[str, ...] = attrib(
        default=tuple(), converter=_to_tuple, kw_only=True
    )

    def __attrs_post_init__(self) -> None:
        for key in self._data:
            check_arg(
                "." not in key, "Parameter keys cannot contain namespace separator '.'"
            )

    @staticmethod
    def empty(*, namespace_prefix: Iterable[str] = tuple()) -> "Parameters":
        """
        A `Parameters` with no parameter mappings.
        """
        return Parameters.from_mapping({}, namespace_prefix=namespace_prefix)

    @staticmethod
    def from_mapping(
        mapping: Mapping, *, namespace_prefix: Iterable[str] = tuple()
    ) -> "Parameters":
        """
        Convert a dictionary of dictionaries into a `Parameters`.

        Each mapping-valued entry becomes a namespace.  Entries whose value is `None` are
        dropped, so optional command-line arguments which were not given can be passed
        straight through.
        """
        check_isinstance(mapping, Mapping)
        namespace_prefix = tuple(namespace_prefix)
        ret: List[Tuple[str, Any]] = []
        for (key, val) in mapping.items():
            if val is None:
                continue
            if isinstance(val, Mapping):
                ret.append(
                    (
                        key,
                        Parameters.from_mapping(
                            val, namespace_prefix=namespace_prefix + (key,)
                        ),
                    )
                )
            else:
                # this case will also be triggered if the value is already a parameters object
                ret.append((key, val))
        return Parameters(ret, namespace_prefix=namespace_prefix)

    def as_nested_dicts(self) -> Dict[str, Any]:
        """
        A nested dictionary representing this `Parameters`.
        """
        return {
            key: val.as_nested_dicts() if isinstance(val, Parameters) else val
            for (key, val) in self._data.items()
        }

    def unify(
        self,
        new_params: Union[Mapping[Any, Any], "Parameters"],
        *,
        namespace_prefix: Sequence[str] = tuple(),
    ) -> "Parameters":
        """
        Get a new `Parameters` combining this `Parameters` and *new_params*.

        Where both define a parameter, the value from *new_params* wins.  Namespaces present
        on both sides are unified recursively.

        For convenience, if a non-`Parameters` mapping is specified for `new_params`,
        `Parameters.from_mapping` will be applied to it.
        """
        if not isinstance(new_params, Parameters):
            new_params = Parameters.from_mapping(new_params)

        ret = dict(self._data)
        for (key, new_val) in new_params._data.items():
            old_val = ret.get(key)
            if old_val is None:
                ret[key] = new_val
            elif isinstance(old_val, Parameters) != isinstance(new_val, Parameters):
                param_str = ".".join(tuple(namespace_prefix) + (key,))
                raise ParameterError(
                    f"When unifying parameters, {param_str} is a parameter on one side and a "
                    f"namespace on the other"
                )
            elif isinstance(old_val, Parameters):
                ret[key] = old_val.unify(
                    new_val, namespace_prefix=tuple(namespace_prefix) + (key,)
                )
            else:
                ret[key] = new_val

        return Parameters.from_mapping(ret, namespace_prefix=namespace_prefix)

    def creatable_file(self, param: str) -> Path:
        """
        Get a file path which can be written to.

        Interprets the string-valued parameter `param` as a file path and creates its parent
        directory if it does not exist.

        Throws a `ParameterError` if `param` is not a known parameter.
        """
        ret = Path.resolve(Path(self.string(param)))
        ret.parent.mkdir(parents=True, exist_ok=True)
        return ret

    def optional_creatable_file(self, param: str) -> Optional[Path]:
        """
        Just like `creatable_file` but returns `None` if the parameter is absent.
        """
        if param in self:
            return self.creatable_file(param)
        else:
            return None

    def existing_file(self, param: str) -> Path:
        """
        Gets a path for an existing file.

        Throws a `ParameterError` if `param` is unknown or names a path which does not exist
        or is not a file.
        """
        ret = Path.resolve(Path(self.string(param)))
        if not ret.exists():
            raise ParameterError(
                f"For parameter {param}, expected an existing file but got non-existent {ret}"
            )
        if not ret.is_file():
            raise ParameterError(
                f"For parameter {param}, expected an existing file but got existing "
                f"non-file {ret}"
            )
        return ret

    def string(
        self,
        param_name: str,
        valid_options: Optional[Iterable[str]] = None,
        default: Optional[str] = None,
    ) -> str:
        """
        Gets a string-valued parameter.

        Throws a `ParameterError` if `param` is not a known parameter.
        """
        ret = self.get(param_name, str, default=default)
        if valid_options is not None and ret not in valid_options:
            raise ParameterError(
                f"The value {ret} for the parameter {param_name} is not one of the valid options "
                f"{tuple(valid_options)}"
            )
        return ret

    def arbitrary_list(self, name: str, *, default: Optional[List] = None) -> List:
        """
        Get a list with arbitrary structure.

        Tuples are accepted too, since that is what programmatic callers tend to pass.
        """
        ret = self.get(name, (list, tuple), default=default)  # type: ignore
        return list(ret)

    def position_list(self, name: str) -> PositionList:
        """
        Gets a cut-style selection list such as ``1,3-5`` as a `PositionList`.

        A bare integer value is accepted as well, since YAML reads ``fields: 2`` as one.

        Throws a `ParameterError` if the selection list is malformed.
        """
        spec = self.get(name, (str, int))  # type: ignore
        if isinstance(spec, bool):
            raise ParameterError(f"Expected a selection list for {name} but got {spec}")
        try:
            return parse_position_list(str(spec))
        except PositionListError as e:
            raise ParameterError(str(e)) from e

    def single_byte(self, name: str, *, default: Optional[str] = None) -> str:
        """
        Gets a single-byte string parameter, such as a field delimiter.
        """
        value = self.string(name, default=default)
        try:
            return parse_delimiter(value)
        except ValueError as e:
            raise ParameterError(str(e)) from e

    def __contains__(self, param_name: str) -> bool:
        return self._private_get(param_name, optional=True) is not None

    def get(
        self,
        param_name: str,
        param_type: Type[_ParamType],
        default: Optional[_ParamType] = None,
    ) -> _ParamType:
        """
        Get a parameter with type-safety.

        Throws a `ParameterError` if the parameter is unknown or not of the specified type.
        """
        ret = self._private_get(param_name, default=default)
        if isinstance(ret, param_type):
            return ret
        raise ParameterError(
            f"{self._namespace_message()}When looking up parameter '{param_name}', "
            f"expected a value of type {param_type}, but got {ret} "
            f"of type {type(ret)}"
        )

    def assert_exactly_one_present(self, param_names: Iterable[str]) -> None:
        param_names = tuple(param_names)
        params_present = [param for param in param_names if param in self]
        if not params_present:
            raise ParameterError(
                f"Exactly one of the parameters {param_names} should be specified, "
                f"but none were."
            )
        if len(params_present) > 1:
            raise ParameterError(
                f"At most one of {param_names} can be specified but "
                f"these were specified: {params_present}"
            )

    def _private_get(
        self, param_name: str, *, optional: bool = False, default: Optional[Any] = None
    ) -> Any:
        check_arg(isinstance(param_name, str))
        check_arg(param_name, "Parameter name cannot be empty")
        # pylint:disable=protected-access

        current: Any = self
        namespaces_processed: List[str] = []
        for param_component in param_name.split("."):
            if isinstance(current, Parameters) and param_component in current._data:
                current = current._data[param_component]
                namespaces_processed.append(param_component)
            elif default is not None:
                return default
            elif optional:
                return None
            elif not isinstance(current, Parameters):
                raise ParameterError(
                    f"{self._namespace_message()}When getting parameter {param_name} "
                    f"expected {'.'.join(namespaces_processed)} to be a namespace, "
                    f"but it is a leaf: {current}"
                )
            else:
                context_string = (
                    "in context " + ".".join(namespaces_processed)
                    if namespaces_processed
                    else "in root context"
                )
                available_parameters = [
                    key
                    for (key, val) in current._data.items()
                    if not isinstance(val, Parameters)
                ]
                available_namespaces = [
                    key for (key, val) in current._data.items() if isinstance(val, Parameters)
                ]
                raise ParameterError(
                    f"{self._namespace_message()}Parameter {param_name} not found. "
                    f"In {context_string} available parameters are {available_parameters}, "
                    f"available namespaces are {available_namespaces}"
                )
        return current

    def __str__(self) -> str:
        str_sink = CharSink.to_string()
        YAMLParametersWriter().write(self, str_sink)
        return str_sink.last_string_written  # type: ignore

    def _namespace_message(self) -> str:
        if self.namespace_prefix:
            namespace_str = ".".join(self.namespace_prefix)
            return f"In namespace {namespace_str}: "
        else:
            return ""


@attrs(auto_attribs=True)
class YAMLParametersLoader:
    """
    Loads `Parameters` from YAML.

    The format of the parameters file is YAML with the following restrictions:
    * all non-leaf objects, including the top-level, must be maps
    * all keys must be strings
    """

    def load(self, f: Union[str, Path]) -> Parameters:
        """
        Loads parameters from a YAML file.
        """
        if isinstance(f, str):
            f = Path(f)
        return self._inner_load_from_string(f.read_text(encoding="utf-8"), str(f))

    def load_string(self, param_file_content: str) -> Parameters:
        """
        Loads parameters from a string.
        """
        return self._inner_load_from_string(
            param_file_content, f"String param file:\n{param_file_content}"
        )

    def _inner_load_from_string(
        self, param_file_content: str, error_string: str
    ) -> Parameters:
        try:
            raw_yaml = yaml.safe_load(param_file_content)
            self._validate(raw_yaml)
            return Parameters.from_mapping(raw_yaml)
        except Exception as e:
            raise IOError(f"Failure while loading parameter file {error_string}") from e

    @staticmethod
    def _validate(raw_yaml: Mapping):
        # we don't use check_isinstance so we can have a custom error message
        check_arg(
            isinstance(raw_yaml, Mapping),
            "Parameters YAML files must be mappings at the top level",
        )
        YAMLParametersLoader._check_all_keys_strings(raw_yaml)

    @staticmethod
    def _check_all_keys_strings(mapping: Mapping, path: Sequence[str] = ()):
        non_string_keys = [x for x in mapping.keys() if not isinstance(x, str)]
        if non_string_keys:
            context_string = (" in context " + ".".join(path)) if path else " in root context"
            raise IOError("Non-string key(s) " + str(non_string_keys) + context_string)

        for key, val in mapping.items():
            if isinstance(val, Mapping):
                YAMLParametersLoader._check_all_keys_strings(val, tuple(path) + (key,))


class YAMLParametersWriter:
    def write(self, params: Parameters, sink: Union[Path, str, CharSink]) -> None:
        if isinstance(sink, (Path, str)):
            sink = CharSink.to_file(sink)
        with sink.open() as out:
            yaml.dump(
                self._preprocess_dicts(params.as_nested_dicts()),
                out,
                # prevents leaf dictionaries from being written in the
                # human unfriendly compact style
                default_flow_style=False,
                indent=4,
                width=78,
                sort_keys=False,
            )

    def _preprocess_dicts(self, param_node: Any) -> Any:
        r"""
        Ensure `Path`\ s and `PositionList`\ s are written out as plain strings.
        """
        if isinstance(param_node, (Path, PositionList)):
            return str(param_node)
        elif isinstance(param_node, Mapping):
            return {k: self._preprocess_dicts(v) for (k, v) in param_node.items()}
        elif isinstance(param_node, (str, int, float)):
            return param_node
        elif isinstance(param_node, Sequence):
            return [self._preprocess_dicts(item) for item in param_node]
        else:
            raise RuntimeError(
                f"Don't know how to serialize out {param_node} as a parameter value"
            )
