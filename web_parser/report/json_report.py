# web_parser/report/json_report.py

"""
Генерация JSON-отчёта для WebParser.

Сериализация списка CrawlSummary в файл.
"""
import json
from pathlib import Path
from typing import Sequence

from web_parser.crawler.models import CrawlSummary


def render_json(summaries: Sequence[CrawlSummary], output_path: Path | str, pretty: bool = True) -> Path:
    """
    Сохраняет сводки обхода в формате JSON по указанному пути.

    :param summaries: список CrawlSummary, по одному на seed-URL
    :param output_path: путь к JSON-файлу
    :param pretty: отступ 2 вместо компактной записи
    :return: Path сохранённого файла

    Пример:
    ```python
    from web_parser.report.json_report import render_json
    report_path = render_json(summaries, 'reports/report.json')
    print(f"JSON report saved to: {report_path}")
    ```
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    data = [summary.to_dict() for summary in summaries]

    with output.open('w', encoding='utf-8') as f:
        json.dump(data, f, ensure_ascii=False, indent=2 if pretty else None)

    return output
