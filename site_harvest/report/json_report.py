# site_harvest/report/json_report.py

"""
JSON report of a SiteHarvest run.

Serializes the crawl statistics to a file.
"""
import json
from pathlib import Path
from typing import Any, Mapping

from site_harvest.crawler.models import CrawlStats


def render_json(report: CrawlStats | Mapping[str, Any], output_path: Path | str) -> Path:
    """
    Save *report* as JSON at *output_path* and return the path.

    :param report: CrawlStats of a run, or its ``as_dict()`` form
    :param output_path: target JSON file

    Example:
    ```python
    from site_harvest.report.json_report import render_json
    report_path = render_json(stats, 'reports/run.json')
    ```
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    data = report.as_dict() if isinstance(report, CrawlStats) else dict(report)

    with output.open('w', encoding='utf-8') as f:
        json.dump(data, f, ensure_ascii=False, indent=2)

    return output
