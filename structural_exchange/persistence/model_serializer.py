"""JSON persistence of the canonical model.

The persisted form is the interchange artifact between import and export
stages that run as separate processes. It is structurally lossless: loading a
saved model yields an equal model. Output is deterministic (sorted keys,
2-space indent) so saved models diff cleanly under version control.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Union

from ..models.canonical_model import CanonicalModel

logger = logging.getLogger(__name__)

FORMAT_VERSION = "1.0"


def canonical_json_dump(data: Any, file_path: Path, **kwargs) -> None:
    """Write JSON with sorted keys for deterministic output.

    Args:
        data: Data to serialize
        file_path: Path to write to
        **kwargs: Additional arguments passed to json.dump
    """
    with open(file_path, "w") as f:
        json.dump(data, f, indent=2, sort_keys=True, **kwargs)


def model_to_dict(model: CanonicalModel) -> Dict[str, Any]:
    """Serialize to plain JSON-compatible data (camelCase keys, no nulls)."""
    return {
        "formatVersion": FORMAT_VERSION,
        "model": model.model_dump(mode="json", by_alias=True, exclude_none=True),
    }


def model_from_dict(data: Dict[str, Any]) -> CanonicalModel:
    """Rebuild a model from ``model_to_dict`` output.

    A bare model dictionary (without the version envelope) is also accepted.

    Raises:
        ValueError: If the format version is not supported
        pydantic.ValidationError: If the data does not describe a valid model
    """
    if "model" in data and "formatVersion" in data:
        version = data["formatVersion"]
        if version != FORMAT_VERSION:
            raise ValueError(f"Unsupported model format version {version!r} (expected {FORMAT_VERSION})")
        data = data["model"]
    return CanonicalModel.model_validate(data)


def save_model(model: CanonicalModel, path: Union[str, Path]) -> Path:
    """Write ``model`` to ``path`` as JSON, creating parent directories."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    canonical_json_dump(model_to_dict(model), path)
    logger.info(f"Saved model to {path}")
    return path


def load_model(path: Union[str, Path]) -> CanonicalModel:
    """Read a model saved by ``save_model``.

    Raises:
        FileNotFoundError: If ``path`` does not exist
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Model file not found: {path}")
    with open(path, "r") as f:
        data = json.load(f)
    model = model_from_dict(data)
    logger.info(f"Loaded model from {path}")
    return model
