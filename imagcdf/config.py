"""
Library settings.

Settings can be read from an INI file with an ``[imagcdf]`` section::

    [imagcdf]
    max_open_files = 4
    compression = gzip6
"""
import configparser
import dataclasses
import logging
import os.path

logger = logging.getLogger(__name__)

SECTION = "imagcdf"


@dataclasses.dataclass(frozen=True)
class Config:
    max_open_files: int = 10
    max_indexed_entries: int = 1000
    format_version: str = "1.3"
    compression: str = "none"
    lower_case_filenames: bool = False


DEFAULT_CONFIG = Config()


def load_config(configuration_file, overrides=None):
    """
    Builds a :class:`Config` from an INI file.

    Keys missing from the file keep their defaults; any value in
    ``overrides`` that is not None wins over the file.
    """
    if configuration_file is None or not os.path.exists(configuration_file):
        raise ValueError(
            "Unable to find configuration file {}".format(configuration_file)
        )
    parser = configparser.ConfigParser()
    parser.read(configuration_file)
    overrides = overrides or {}

    values = {}
    for field in dataclasses.fields(Config):
        if overrides.get(field.name) is not None:
            values[field.name] = overrides[field.name]
        elif parser.has_option(SECTION, field.name):
            values[field.name] = _get_value(parser, field)
    config = Config(**values)
    logger.debug("Loaded %s from %s", config, configuration_file)
    return config


def _get_value(parser, field):
    if field.type in (bool, "bool"):
        return parser.getboolean(SECTION, field.name)
    elif field.type in (int, "int"):
        return parser.getint(SECTION, field.name)
    return parser.get(SECTION, field.name)
