"""web_parser.report: сохранение результатов обхода (JSON)."""

from web_parser.report.json_report import render_json

__all__ = ["render_json"]
