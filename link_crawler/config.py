# === FILE: link_crawler/config.py ===
"""
Модуль для загрузки и валидации конфигурации обхода LinkCrawler.
Используется Pydantic для описания схемы и проверки данных.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from link_crawler.crawler.crawler import DEFAULT_CONCURRENCY
from link_crawler.crawler.fetcher import DEFAULT_CHUNK_SIZE, DEFAULT_USER_AGENT
from link_crawler.utils import parse_url


class CrawlerConfig(BaseModel):
    """Конфигурация для одного запуска обхода."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    start_url: str = Field(..., description="Seed URL, абсолютный http(s) URL.")
    host: Optional[str] = Field(
        None, description="Ограничение по хосту; None: взять из start_url, '': без ограничения."
    )
    concurrency: int = Field(DEFAULT_CONCURRENCY, ge=1, description="Макс. число одновременных загрузок.")
    deadline: Optional[float] = Field(None, gt=0, description="Общий лимит времени обхода (секунд).")
    user_agent: str = Field(DEFAULT_USER_AGENT, min_length=1, description="Заголовок User-Agent.")
    chunk_size: int = Field(DEFAULT_CHUNK_SIZE, ge=1, description="Размер читаемого блока тела ответа.")

    @field_validator("start_url")
    def _check_start_url(cls, v: str) -> str:
        v = v.strip()
        parts = parse_url(v)
        if parts.scheme not in ("http", "https") or not parts.netloc:
            raise ValueError(f"start_url must be an absolute http(s) URL, got {v!r}")
        return v


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Неправильный YAML в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень YAML должен быть mapping, получено {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"Неправильный JSON в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень JSON должен быть mapping, получено {type(data).__name__}")
    return data


def read_config_file(path: Union[str, Path]) -> dict[str, Any]:
    """Читает YAML или JSON файл конфигурации в словарь (без валидации)."""
    path_obj = Path(path).expanduser().resolve()
    if not path_obj.is_file():
        raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        return _read_yaml(path_obj)
    if suffix == ".json":
        return _read_json(path_obj)
    raise ValueError(f"Неподдерживаемый формат конфига: {suffix}")


def load_config(path: Union[str, Path, None] = None, **overrides: Any) -> CrawlerConfig:
    """
    Собирает CrawlerConfig из файла (YAML/JSON, необязательно) и переопределений.
    Переопределения со значением None игнорируются; так CLI передаёт только
    явно заданные опции.
    """
    data: dict[str, Any] = read_config_file(path) if path is not None else {}
    data.update({key: value for key, value in overrides.items() if value is not None})
    return CrawlerConfig(**data)
