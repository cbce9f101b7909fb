"""Reading and writing the JSON build artifacts."""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pydantic import TypeAdapter, ValidationError

from sitegraph.core.links import LinkIndex
from sitegraph.core.models import BacklinkEntry, BacklinkGraph, Document
from sitegraph.exceptions import ArtifactError

logger = logging.getLogger(__name__)

DOCUMENTS_FILE = "documents.json"
LINK_INDEX_FILE = "link-index.json"
BACKLINKS_FILE = "backlinks.json"

_documents_adapter = TypeAdapter(list[Document])
_backlinks_adapter = TypeAdapter(dict[str, list[BacklinkEntry]])


@dataclass
class ArtifactSet:
    """Everything a build produces."""

    documents: list[Document]
    link_index: LinkIndex
    backlinks: BacklinkGraph


def write_json(path: Path, data: Any) -> None:
    """Write pretty-printed, newline-terminated JSON in a single write."""
    payload = json.dumps(data, indent=2, ensure_ascii=False)
    path.write_text(payload + "\n", encoding="utf-8")


def write_artifacts(output_dir: Path, artifacts: ArtifactSet) -> None:
    """Write documents, link index and backlinks into ``output_dir``."""
    output_dir.mkdir(parents=True, exist_ok=True)

    write_json(
        output_dir / DOCUMENTS_FILE,
        _documents_adapter.dump_python(artifacts.documents, mode="json"),
    )
    write_json(output_dir / LINK_INDEX_FILE, artifacts.link_index.to_json())
    write_json(
        output_dir / BACKLINKS_FILE,
        _backlinks_adapter.dump_python(artifacts.backlinks, mode="json"),
    )
    logger.info("Wrote artifacts to %s", output_dir)


def _read_json(path: Path) -> Any:
    if not path.exists():
        raise ArtifactError(f"Missing: {path.name}")
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ArtifactError(f"Invalid JSON in {path.name}: {e}") from e


def load_artifacts(output_dir: Path) -> ArtifactSet:
    """Load a previous build's artifacts from ``output_dir``."""
    documents_raw = _read_json(output_dir / DOCUMENTS_FILE)
    index_raw = _read_json(output_dir / LINK_INDEX_FILE)
    backlinks_raw = _read_json(output_dir / BACKLINKS_FILE)

    try:
        documents = _documents_adapter.validate_python(documents_raw)
        backlinks = _backlinks_adapter.validate_python(backlinks_raw)
    except ValidationError as e:
        raise ArtifactError(f"Malformed artifact in {output_dir}: {e}") from e
    if not isinstance(index_raw, dict):
        raise ArtifactError(f"{LINK_INDEX_FILE} must be a JSON object")

    return ArtifactSet(
        documents=documents,
        link_index=LinkIndex.from_json(index_raw),
        backlinks=backlinks,
    )
