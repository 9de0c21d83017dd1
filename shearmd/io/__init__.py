"""I/O layer for configuration files."""

from .config_file import (
    CNF_PREFIX,
    INPUT_TAG,
    OUTPUT_TAG,
    SAVE_TAG,
    ConfigurationReader,
    ConfigurationWriter,
    block_tag,
    read_configuration,
    write_configuration,
)

__all__ = [
    "CNF_PREFIX",
    "INPUT_TAG",
    "OUTPUT_TAG",
    "SAVE_TAG",
    "ConfigurationReader",
    "ConfigurationWriter",
    "block_tag",
    "read_configuration",
    "write_configuration",
]
