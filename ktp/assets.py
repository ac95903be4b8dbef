"""Vite asset manifest resolution."""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Mapping

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AssetManifest:
    """
    Immutable mapping from source entry points to built files.

    Without a manifest on disk the portal runs in development mode and
    points asset URLs at the Vite dev server.
    """

    chunks: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    is_dev: bool = True
    dev_server_url: str = "http://localhost:5173"
    static_prefix: str = "/static/"

    @classmethod
    def load(cls, manifest_path, dev_server_url: str) -> "AssetManifest":
        path = Path(manifest_path)
        if not path.exists():
            logger.info(f"No Vite manifest at {path}, serving assets from {dev_server_url}")
            return cls(is_dev=True, dev_server_url=dev_server_url.rstrip("/"))

        try:
            raw = json.loads(path.read_text())
        except (OSError, ValueError) as e:
            raise RuntimeError(f"Could not parse Vite manifest {path}: {e}") from e

        chunks = {src: chunk["file"] for src, chunk in raw.items() if "file" in chunk}
        logger.info(f"Loaded Vite manifest with {len(chunks)} entries")
        return cls(
            chunks=MappingProxyType(chunks),
            is_dev=False,
            dev_server_url=dev_server_url.rstrip("/"),
        )

    def url(self, source: str) -> str:
        """Public URL of a source asset such as ``assets/js/main.js``."""
        if self.is_dev:
            return f"{self.dev_server_url}/{source}"
        # Fall back to the unhashed path when the entry is missing
        return f"{self.static_prefix}{self.chunks.get(source, source)}"
