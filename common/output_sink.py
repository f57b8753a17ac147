"""
Output directory shared by the chart renderer and the report writer.
"""

import os
import json
import logging
from typing import Any, Dict

logger = logging.getLogger(__name__)


class OutputSink:
    """Writes converter outputs into a single directory.

    Files are always overwritten, so re-running a conversion replaces the
    previous outputs instead of accumulating them.

    Attributes:
        output_dir: Directory receiving reports and charts
    """

    def __init__(self, output_dir: str):
        self.output_dir = output_dir

    def ensure(self) -> bool:
        """Create the output directory if missing.

        Returns:
            True if the directory had to be created
        """
        if os.path.isdir(self.output_dir):
            return False

        os.makedirs(self.output_dir, exist_ok=True)
        logger.info(f"Created {self.output_dir}/ directory")
        return True

    def path(self, name: str) -> str:
        return os.path.join(self.output_dir, name)

    def exists(self, name: str) -> bool:
        return os.path.isfile(self.path(name))

    def write_bytes(self, name: str, data: bytes) -> str:
        """Write a binary file (charts).

        Returns:
            Full path of the written file
        """
        filepath = self.path(name)
        with open(filepath, 'wb') as f:
            f.write(data)
        return filepath

    def write_json(self, name: str, document: Dict[str, Any]) -> str:
        """Write a pretty-printed UTF-8 JSON document.

        Returns:
            Full path of the written file
        """
        filepath = self.path(name)
        with open(filepath, 'w', encoding='utf-8') as f:
            json.dump(document, f, indent=2, ensure_ascii=False)
        return filepath

    def remove(self, name: str) -> bool:
        """Delete an output file if present.

        Returns:
            True if a file was removed
        """
        if not self.exists(name):
            return False
        os.remove(self.path(name))
        return True
