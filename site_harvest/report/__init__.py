"""site_harvest.report: run reports written by the CLI."""

from site_harvest.report.json_report import render_json

__all__ = ["render_json"]
