"""
Transcoding of the trailing metadata record into a ModelDescriptor.

JSON syntax and schema conformance are checked in one validating pass; the
two failure classes are told apart by the pydantic error types.
"""

from __future__ import annotations

import logging

from pydantic import ValidationError

from ..errors import MetadataTranscodeError, SchemaValidationError
from .descriptors import ModelDescriptor

logger = logging.getLogger(__name__)

__all__ = ["transcode_metadata"]


def transcode_metadata(data: bytes, max_proto_version: int = 1) -> ModelDescriptor:
    """
    Parse metadata record bytes into a validated descriptor tree.

    Args:
        data: Raw JSON text of the metadata record.
        max_proto_version: Newest metadata document version accepted.

    Returns:
        The fully populated, read-only ModelDescriptor.

    Raises:
        MetadataTranscodeError: If the record is not valid UTF-8 JSON.
        SchemaValidationError: If the document does not match the schema.
    """
    try:
        model_def = ModelDescriptor.model_validate_json(data)
    except ValidationError as e:
        if any(err["type"] == "json_invalid" for err in e.errors()):
            raise MetadataTranscodeError(f"Metadata record is not valid JSON: {e}") from e
        raise SchemaValidationError(f"Metadata does not match the model schema: {e}") from e

    if model_def.proto_version > max_proto_version:
        raise SchemaValidationError(
            f"Metadata version {model_def.proto_version} is newer than "
            f"supported version {max_proto_version}"
        )

    logger.debug(
        f"Transcoded metadata: {len(model_def.tensors)} tensors, "
        f"producer '{model_def.producer_name}' version '{model_def.producer_version}'"
    )
    return model_def
