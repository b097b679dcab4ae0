"""Schemas for submit/delete/leaderboard."""

from __future__ import annotations

from marshmallow import EXCLUDE, Schema, fields

from studio_bingo.schemas.fields import SafeText, UtcDateTime
from studio_bingo.services.submission_service import (
    DISPLAY_NAME_MAX_LEN,
    TEAM_MAX_LEN,
    WEEK_ID_MAX_LEN,
)


class SubmitRequestSchema(Schema):
    """Validate submit payload. Emptiness is checked by the service."""

    class Meta:
        unknown = EXCLUDE

    week_id = SafeText(WEEK_ID_MAX_LEN)
    display_name = SafeText(DISPLAY_NAME_MAX_LEN)
    marked_mask = SafeText(None)
    team = SafeText(TEAM_MAX_LEN)


class DeleteRequestSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    week_id = SafeText(WEEK_ID_MAX_LEN)


class ScoreResultSchema(Schema):
    marked_count = fields.Int(required=True)
    bingo_count = fields.Int(required=True)
    full_card = fields.Bool(required=True)
    tickets_total = fields.Int(required=True)


class SubmitResponseSchema(Schema):
    ok = fields.Constant(True)
    week_id = fields.Str(required=True)
    device_id = fields.Str(required=True)
    marked_mask = fields.Str(required=True)
    computed = fields.Nested(ScoreResultSchema, required=True)
    updated_at = UtcDateTime(required=True)


class LeaderboardRowSchema(Schema):
    """Serialize a Submission for public display (no device id)."""

    week_id = fields.Str()
    display_name = fields.Str()
    team = fields.Str(allow_none=True)
    tickets_total = fields.Int()
    marked_count = fields.Int()
    bingo_count = fields.Int()
    full_card = fields.Bool()
    updated_at = UtcDateTime()
