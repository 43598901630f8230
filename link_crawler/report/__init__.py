# File: link_crawler/report/__init__.py
"""link_crawler.report: вывод результата обхода в лог и в JSON-файл."""

from __future__ import annotations

from link_crawler.report.json_report import render_json
from link_crawler.report.log_report import render_log

__all__ = ["render_json", "render_log"]
