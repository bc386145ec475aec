import logging
import logging.config
import sys

from cututils.parameters import ParameterError, Parameters

log = logging.getLogger(__name__)  # pylint:disable=invalid-name

# we need to store this mapping here because logging doesn't provide a (non-deprecated) way to map
# from strings to levels
# https://github.com/python/typeshed/issues/1842
_LEVEL_STRINGS_TO_LEVELS = {
    "CRITICAL": logging.CRITICAL,
    "FATAL": logging.FATAL,
    "ERROR": logging.ERROR,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "INFO": logging.INFO,
    "DEBUG": logging.DEBUG,
}

# stdout carries extracted text
DEFAULT_ROOT_LEVEL = "WARNING"

_CUTUTILS_HANDLER_MARKER = "_cututils_console_handler"


def configure_logging_from(params: Parameters) -> None:
    """
    Configures logging from parameters.

    This will examine the 'logging' namespace of the provided parameters. If that namespace
    has a 'config_file' parameter, logging will be configured based on the logging config file
    it points to.  Otherwise the root logger gets a console handler on stderr at the level
    given by 'logging.root_level' (default WARNING).  For reference, the standard values are
    CRITICAL, FATAL, ERROR, WARNING, INFO, and DEBUG.
    """
    if "logging.config_file" in params:
        logging.config.fileConfig(str(params.existing_file("logging.config_file")))
    else:
        _config_logging_from_params(params)

    log.debug("Running with parameters:\n%s", params)


def _config_logging_from_params(params: Parameters) -> None:
    out_format = "[%(asctime)s] %(levelname)s:%(name)s:%(message)s"
    date_format = "%Y-%m-%d %H:%M:%S"

    set_root_level_to = params.string(
        "logging.root_level", default=DEFAULT_ROOT_LEVEL
    ).upper()

    try:
        level = _LEVEL_STRINGS_TO_LEVELS[set_root_level_to]
    except KeyError:
        raise ParameterError(
            "Invalid logging level {!s}. Valid levels "
            "are {!s}".format(set_root_level_to, list(_LEVEL_STRINGS_TO_LEVELS.keys()))
        )
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # log to stderr
    console_handler = logging.StreamHandler(stream=sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(out_format, date_format))
    # replace, never stack, our own handler
    for existing_handler in list(root_logger.handlers):
        if getattr(existing_handler, _CUTUTILS_HANDLER_MARKER, False):
            root_logger.removeHandler(existing_handler)
    setattr(console_handler, _CUTUTILS_HANDLER_MARKER, True)
    root_logger.addHandler(console_handler)
