"""Multipart image upload handling."""

from __future__ import annotations

from dataclasses import dataclass

from flask import request

from studio_bingo.errors import PayloadTooLargeError, ValidationError


@dataclass(frozen=True)
class UploadedImage:
    data: bytes
    mime_type: str


def read_image(field: str, max_bytes: int) -> UploadedImage:
    """Read one image file from a multipart form, enforcing ``max_bytes``."""

    if request.mimetype != "multipart/form-data":
        raise ValidationError("Expected a multipart/form-data body", code="expected_multipart")

    file = request.files.get(field)
    if file is None or not file.filename:
        raise ValidationError(f"Form field '{field}' must be an image file", code="missing_image")

    data = file.stream.read(max_bytes + 1)
    if len(data) > max_bytes:
        raise PayloadTooLargeError(message="Image is too large", details={"max_bytes": max_bytes})

    return UploadedImage(data=data, mime_type=file.mimetype or "image/jpeg")
