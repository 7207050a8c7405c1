"""
Write a DigestResult to disk as timestamped text and JSON files.
"""
import logging
from pathlib import Path
from typing import List, Union

from pydantic import BaseModel, TypeAdapter

from codedigest.models import DigestResult, ScanEntry

logger = logging.getLogger(__name__)

OUTPUT_FORMATS = ("json", "text", "both")

_ENTRIES = TypeAdapter(List[ScanEntry])


def _stamp(timestamp: str) -> str:
    return timestamp.replace(":", "-").replace(".", "-")


def _write(path: Path, text: str, written: List[Path]) -> None:
    path.write_text(text, encoding="utf-8")
    logger.info("Wrote %s", path)
    written.append(path)


def _json(model: Union[BaseModel, List[ScanEntry]]) -> str:
    if isinstance(model, BaseModel):
        return model.model_dump_json(indent=2, by_alias=True)
    return _ENTRIES.dump_json(model, indent=2, by_alias=True).decode("utf-8")


def write_output(output_dir: Union[str, Path], result: DigestResult, output_format: str = "both") -> List[Path]:
    """Write metadata plus the tree and digest in the requested format.

    Returns the written paths in order. Filesystem errors propagate.
    """
    if output_format not in OUTPUT_FORMATS:
        raise ValueError(f"output_format must be one of {OUTPUT_FORMATS}, got {output_format!r}")

    out = Path(output_dir)
    out.mkdir(parents=True, exist_ok=True)
    stamp = _stamp(result.metadata.timestamp)
    written: List[Path] = []

    _write(out / f"metadata-{stamp}.json", _json(result.metadata), written)
    if output_format in ("text", "both"):
        _write(out / f"tree-{stamp}.txt", result.tree.text, written)
        _write(out / f"digest-{stamp}.txt", result.files.text, written)
    if output_format in ("json", "both"):
        _write(out / f"tree-{stamp}.json", _json(result.tree.root), written)
        _write(out / f"digest-{stamp}.json", _json(result.files.entries), written)
    return written
