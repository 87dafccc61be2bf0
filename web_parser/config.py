# === FILE: web_parser/config.py ===
"""
Загрузка и валидация конфигурации WebParser.

Два уровня настроек:

* :class:`ParserSettings` – настройки процесса (паттерн домена, размеры пулов,
  таймауты, фильтр ссылок, политика реестра отправленных ссылок);
* :class:`CrawlConfig` – неизменяемые параметры одного запроса, которые
  передаются через весь обход явно.

Используется Pydantic для описания схемы и проверки данных.
"""
from __future__ import annotations

import errno
import json
import logging
import os
import re
from pathlib import Path
from typing import Any, List, Literal, Optional, Tuple, Union

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    HttpUrl,
    field_validator,
)

__all__ = (
    "DEFAULT_DOMAIN_PATTERN",
    "ParserSettings",
    "CrawlConfig",
    "load_settings",
    "load_excluded_substrings",
)

log = logging.getLogger("WebParser")

#: host without a leading ``www.``; group 1 is the domain identifier
DEFAULT_DOMAIN_PATTERN = r"^https?://(?:www\.)?([^/:?#]+)"

_DEFAULT_CFG = Path("configs/default.yaml")

# BOM and zero-width space that editors like to leave at the start of lines
_INVISIBLE_PREFIX = "\ufeff\u200b"


class ParserSettings(BaseModel):
    """Настройки процесса: общие для всех запросов."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    domain_name_pattern: str = Field(
        DEFAULT_DOMAIN_PATTERN, description="Регулярное выражение, группа 1 – идентификатор домена."
    )
    seed_concurrency: int = Field(10, ge=1, description="Сколько seed-URL обходятся одновременно.")
    fetch_concurrency: int = Field(20, ge=1, description="Сколько GET-запросов выполняется одновременно.")
    timeout: float = Field(10.0, gt=0, description="Таймаут на один запрос (секунд).")
    user_agent: str = Field("WebParserBot/1.0", min_length=1, description="Заголовок User-Agent.")
    retry_times: int = Field(2, ge=0, description="Число повторных попыток при 5xx и 429.")
    filter_config: Optional[Path] = Field(None, description="Файл со списком исключаемых подстрок.")
    excluded_substrings: List[str] = Field(
        default_factory=list, description="Дополнительные исключаемые подстроки."
    )
    sent_registry_scope: Literal["process", "request"] = Field(
        "process", description="Время жизни реестра отправленных на вебхук ссылок."
    )
    sent_registry_ttl: Optional[float] = Field(
        3600.0, gt=0, description="Сколько секунд ссылка считается отправленной (None – всегда)."
    )
    host: str = Field("127.0.0.1", description="Адрес HTTP-сервера.")
    port: int = Field(8080, ge=1, le=65535, description="Порт HTTP-сервера.")

    @field_validator("domain_name_pattern")
    @classmethod
    def _check_pattern_compiles(cls, v: str) -> str:
        try:
            re.compile(v, re.IGNORECASE)
        except re.error as exc:
            raise ValueError(f"Неправильный domain_name_pattern {v!r}: {exc}") from exc
        return v

    def exclusion_list(self) -> Tuple[str, ...]:
        """Подстроки из файла фильтра, затем подстроки из конфига."""
        from_file: Tuple[str, ...] = ()
        if self.filter_config is not None:
            from_file = load_excluded_substrings(self.filter_config)
        return from_file + tuple(s for s in self.excluded_substrings if s.strip())


class CrawlConfig(BaseModel):
    """Параметры одного запроса на обход."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    webhook_url: Optional[HttpUrl] = Field(None, description="Куда отправлять каждый результат.")
    max_links_per_seed: int = Field(0, ge=0, description="Лимит результатов на seed (0 – без лимита).")
    clean_text: bool = Field(True, description="Очищенный текст вместо сырого HTML.")
    dispatch_delay_seconds: int = Field(0, ge=0, description="Пауза перед каждой отправкой на вебхук.")

    @property
    def dispatch_mode(self) -> bool:
        return self.webhook_url is not None


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


def load_settings(path: Union[str, Path, None]) -> ParserSettings:
    """
    Читает YAML или JSON и возвращает проверенный объект ParserSettings.
    Без пути берёт configs/default.yaml, а если его нет – значения по умолчанию.
    Явно указанный, но отсутствующий файл – FileNotFoundError.
    """
    if path is None:
        if not _DEFAULT_CFG.exists():
            return ParserSettings()
        path_obj = _DEFAULT_CFG
    else:
        path_obj = Path(path).expanduser().resolve()
        if not path_obj.is_file():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        data = _read_yaml(path_obj)
    elif suffix == ".json":
        data = _read_json(path_obj)
    else:
        raise ValueError(f"Неподдерживаемый формат конфига: {suffix}")

    return ParserSettings(**data)


def load_excluded_substrings(path: Union[str, Path]) -> Tuple[str, ...]:
    """
    Читает файл фильтра: одна подстрока на строку, ``#`` – комментарий.
    Отсутствующий файл не ошибка: пустой список и предупреждение в лог.
    """
    p = Path(path).expanduser()
    if not p.is_file():
        log.warning("Filter file not found: %s", p)
        return ()
    try:
        lines = p.read_text(encoding="utf-8").splitlines()
    except (OSError, UnicodeDecodeError) as exc:
        log.warning("Cannot read filter file %s: %s", p, exc)
        return ()
    cleaned = (line.strip().lstrip(_INVISIBLE_PREFIX).strip() for line in lines)
    substrings = tuple(line for line in cleaned if line and not line.startswith("#"))
    log.debug("Loaded %d excluded substrings from %s", len(substrings), p)
    return substrings
