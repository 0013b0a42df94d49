"""
File provider for pre-fetched source exports.
"""

import logging
from pathlib import Path
from typing import Union

from ..exceptions import SourceNotFoundError
from .csv_parser import decode_text

logger = logging.getLogger(__name__)


class SourceFileProvider:
    """Reads source exports from a data directory."""

    def __init__(self, data_dir: Union[str, Path]):
        self.data_dir = Path(data_dir)

    def resolve(self, file_name: str) -> Path:
        """Resolve path relative to data_dir."""
        path = Path(file_name)
        if path.is_absolute():
            return path
        return self.data_dir / path

    def read_text(self, file_name: str) -> str:
        """
        Read and decode a source export.

        Raises:
            SourceNotFoundError: if the file does not exist
            ParseError: if the content is not UTF-8 text
        """
        path = self.resolve(file_name)
        if not path.is_file():
            raise SourceNotFoundError(file_name, path)
        logger.debug(f"Reading source file {path}")
        return decode_text(path.read_bytes())
