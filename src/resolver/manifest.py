"""Read/modify/write access to composer.json manifests.

Every modification loads the file, applies the change and writes it back
so unrelated content and key order are preserved.
"""
from __future__ import annotations

import json
import os
from typing import Any, Dict, List

from common.exceptions import DeclarationFileIsInvalid
from common.filesystem import dump_file


def encode_json(data: Any) -> str:
    """Encode data the way Composer writes manifests (4 space indent, unescaped unicode)."""
    return json.dumps(data, indent=4, ensure_ascii=False) + "\n"


class JsonManifest:
    """A composer.json file on disk."""

    def __init__(self, filename: str):
        self.filename = filename

    def exists(self) -> bool:
        return os.path.isfile(self.filename)

    def read(self) -> Dict[str, Any]:
        """Load the manifest.

        Raises:
            DeclarationFileIsInvalid: If the file is missing, unreadable or not a JSON object.
        """
        try:
            with open(self.filename, "r", encoding="utf-8") as handle:
                data = json.load(handle)
        except (OSError, ValueError) as exc:
            raise DeclarationFileIsInvalid(self.filename, original_exception=exc) from exc
        if not isinstance(data, dict):
            raise DeclarationFileIsInvalid(self.filename)
        return data

    def write(self, data: Dict[str, Any]) -> None:
        dump_file(self.filename, encode_json(data))

    def add_property(self, path: str, value: Any) -> None:
        """Set a property; dots in ``path`` address nested objects."""
        data = self.read()
        segments = path.split(".")
        current = data
        for segment in segments[:-1]:
            if not isinstance(current.get(segment), dict):
                current[segment] = {}
            current = current[segment]
        current[segments[-1]] = value
        self.write(data)

    def remove_property(self, path: str) -> None:
        """Remove a property if present; dots in ``path`` address nested objects."""
        data = self.read()
        segments = path.split(".")
        current = data
        for segment in segments[:-1]:
            current = current.get(segment)
            if not isinstance(current, dict):
                return
        if segments[-1] in current:
            del current[segments[-1]]
            self.write(data)

    def add_link(self, link_type: str, name: str, constraint: str) -> None:
        """Add a package link (``require``, ``provide``, ...)."""
        data = self.read()
        links = data.get(link_type)
        if not isinstance(links, dict):
            links = {}
        links[name] = constraint
        data[link_type] = links
        self.write(data)

    def add_config_setting(self, name: str, value: Any) -> None:
        data = self.read()
        config = data.get("config")
        if not isinstance(config, dict):
            config = {}
        config[name] = value
        data["config"] = config
        self.write(data)

    def add_repository(self, repository: Any) -> None:
        data = self.read()
        repositories: List[Any] = data.get("repositories") if isinstance(data.get("repositories"), list) else []
        repositories.append(repository)
        data["repositories"] = repositories
        self.write(data)
