"""Schemas for week statistics."""

from __future__ import annotations

from marshmallow import Schema, fields


class CellStatSchema(Schema):
    idx = fields.Int()
    label = fields.Str(allow_none=True)
    count = fields.Int()
    pct = fields.Int()


class TeamTotalSchema(Schema):
    team = fields.Str()
    tickets_total = fields.Int()
    devices = fields.Int()


class WeekStatsSchema(Schema):
    week_id = fields.Str()
    total_submissions = fields.Int()
    cells = fields.List(fields.Nested(CellStatSchema))
    teams = fields.List(fields.Nested(TeamTotalSchema))
