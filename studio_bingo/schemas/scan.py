"""Schemas for scan results."""

from __future__ import annotations

from marshmallow import Schema, fields

from studio_bingo.schemas.submission import ScoreResultSchema


class CellSchema(Schema):
    r = fields.Int()
    c = fields.Int()


class ScanResponseSchema(Schema):
    week = fields.Str(allow_none=True)
    marked_cells = fields.List(fields.Nested(CellSchema))
    confidence = fields.Float()
    notes = fields.Str()
    dropped = fields.Int()
    marked_mask = fields.Str()
    added = fields.List(fields.Int())
    computed = fields.Nested(ScoreResultSchema)
