"""Persisted JSON form of the canonical model."""

from .model_serializer import (
    FORMAT_VERSION,
    canonical_json_dump,
    model_to_dict,
    model_from_dict,
    save_model,
    load_model,
)

__all__ = [
    "FORMAT_VERSION",
    "canonical_json_dump",
    "model_to_dict",
    "model_from_dict",
    "save_model",
    "load_model",
]
