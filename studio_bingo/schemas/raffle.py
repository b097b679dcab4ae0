"""Schemas for the raffle wheel."""

from __future__ import annotations

from marshmallow import EXCLUDE, Schema, fields, validate

from studio_bingo.schemas.fields import SafeText
from studio_bingo.services.submission_service import WEEK_ID_MAX_LEN


class RaffleRequestSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    week_id = SafeText(WEEK_ID_MAX_LEN)
    exclude = fields.List(fields.Str(), load_default=list, validate=validate.Length(max=500))


class ParticipantSchema(Schema):
    display_name = fields.Str()
    team = fields.Str(allow_none=True)
    tickets_total = fields.Int()
    pct = fields.Float()
