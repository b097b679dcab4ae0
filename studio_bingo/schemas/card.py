"""Schemas for card definitions."""

from __future__ import annotations

from marshmallow import EXCLUDE, Schema, fields, validate

from studio_bingo.schemas.fields import SafeText, UtcDateTime
from studio_bingo.services.board import CELL_COUNT
from studio_bingo.services.submission_service import WEEK_ID_MAX_LEN

CELL_LABEL_MAX_LEN = 200


class CardDefinitionSchema(Schema):
    """Validate a direct card definition."""

    class Meta:
        unknown = EXCLUDE

    week_id = SafeText(WEEK_ID_MAX_LEN)
    cells = fields.List(
        fields.Str(validate=validate.Length(max=CELL_LABEL_MAX_LEN)),
        required=True,
        validate=validate.Length(equal=CELL_COUNT),
    )


class CardSchema(Schema):
    week_id = fields.Str(required=True)
    cells = fields.List(fields.Str(), required=True)
    created_at = UtcDateTime()
