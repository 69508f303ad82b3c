"""
File rule source (YAML or JSON).
"""

import asyncio
from pathlib import Path
from typing import Any, Dict, Union

import yaml

from shared.logging import get_logger
from shared.errors import RuleLoadError


class FileRuleSource:
    """Reads rules from a YAML or JSON file.

    The file holds either ``{"data": [...]}`` or a bare list of rules; the
    result is always returned in the ``{"data": [...]}`` envelope.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self.logger = get_logger("permissions.file_source")

    async def fetch_rules(self) -> Dict[str, Any]:
        return await asyncio.to_thread(self._read)

    def _read(self) -> Dict[str, Any]:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                content = yaml.safe_load(f)
        except OSError as e:
            self.logger.error("Rule file unreadable", path=str(self.path), error=str(e))
            raise RuleLoadError("Rule file unreadable", details={"path": str(self.path), "error": str(e)})
        except yaml.YAMLError as e:
            self.logger.error("Rule file is not valid YAML/JSON", path=str(self.path), error=str(e))
            raise RuleLoadError("Rule file is not valid YAML/JSON", details={"path": str(self.path), "error": str(e)})

        if content is None:
            content = []
        if isinstance(content, list):
            content = {"data": content}
        if not isinstance(content, dict):
            raise RuleLoadError(
                "Rule file must contain a list or a 'data' mapping",
                details={"path": str(self.path), "type": type(content).__name__}
            )
        return content
