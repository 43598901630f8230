# link_crawler/report/json_report.py

"""
Генерация JSON-отчёта для проекта LinkCrawler.

Сериализация карты «страница → ссылки» в файл.
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Mapping, Sequence


def render_json(links: Mapping[str, Sequence[str]], output_path: Path | str, pretty: bool = False) -> Path:
    """
    Сохраняет результат обхода в формате JSON по указанному пути.

    :param links: карта URL страницы -> ссылки на ней
    :param output_path: путь к JSON-файлу
    :param pretty: отступ 2 вместо компактной записи
    :return: Path сохранённого файла

    Пример:
    ```python
    from link_crawler.report.json_report import render_json
    report_path = render_json(links, 'reports/links.json', pretty=True)
    ```
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    # Страницы и ссылки отсортированы, как и в выводе в лог
    data = {
        "pages": len(links),
        "links": {page: sorted(links[page]) for page in sorted(links)},
    }

    with output.open("w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, indent=2 if pretty else None)

    return output
