from json import JSONDecodeError, load
from os.path import basename, dirname, isabs, join
from re import Pattern, compile as compile_pattern, error as PatternError
from typing import Iterable, Tuple

from jsonschema import ValidationError, validate
from linz_logger import get_log

from .exceptions import ConfigurationError
from .logging_keys import LOG_MESSAGE_CONFIGURATION_FAILURE

PatternSet = Tuple[Pattern[str], ...]

PATTERN_FILE_SCHEMA = {"type": "array", "items": {"type": "string"}}
KEY_SEPARATOR = "/"

LOGGER = get_log()


def get_file_name(object_key: str) -> str:
    return basename(object_key.rstrip(KEY_SEPARATOR))


def matches(object_key: str, patterns: Iterable[Pattern[str]]) -> bool:
    """True if any pattern matches the whole base name of `object_key`."""
    file_name = get_file_name(object_key)
    return any(pattern.fullmatch(file_name) is not None for pattern in patterns)


def load_patterns(path: str) -> PatternSet:
    """
    Load a JSON array of regular expressions.

    Relative paths are resolved against this package, so the bundled `file_configs` work from any
    working directory. Anything wrong with the file is a configuration error: an unreadable pattern
    set must never be treated as "nothing excluded".
    """
    full_path = path if isabs(path) else join(dirname(__file__), path)

    try:
        with open(full_path, encoding="utf-8") as file_pointer:
            pattern_strings = load(file_pointer)
        validate(pattern_strings, PATTERN_FILE_SCHEMA)
        return tuple(compile_pattern(pattern_string) for pattern_string in pattern_strings)
    except (OSError, JSONDecodeError, ValidationError, PatternError) as error:
        LOGGER.error(LOG_MESSAGE_CONFIGURATION_FAILURE, path=full_path, error=str(error))
        raise ConfigurationError(
            f"Unable to load file patterns from “{full_path}”: {error}"
        ) from error
