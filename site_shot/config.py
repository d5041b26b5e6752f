# === FILE: site_shot/config.py ===
"""
Модуль для загрузки и валидации конфигурации SiteShot.
Используется Pydantic для описания схемы и проверки данных.
Объект конфигурации неизменяем и передаётся в каждый компонент при создании.
"""
from __future__ import annotations

import errno
import json
import os
from datetime import date
from pathlib import Path
from typing import Any, Optional, Union

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    HttpUrl,
    field_validator,
)

__all__ = ["ShotConfig", "load_config", "build_config", "dated_output_dir"]

_OUTPUT_ROOT = Path("screens")
_LOG_NAME = "completed.log"


def dated_output_dir(today: Optional[date] = None) -> Path:
    """Возвращает screens/<YYYY-MM-DD> для текущей (или заданной) даты."""
    return _OUTPUT_ROOT / (today or date.today()).isoformat()


class ShotConfig(BaseModel):
    """Конфигурация одного запуска SiteShot."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    base_url: HttpUrl = Field(..., description="Корневой URL сайта.")
    output_dir: Path = Field(default_factory=dated_output_dir, description="Папка для скриншотов.")
    log_path: Optional[Path] = Field(None, description="Журнал завершённых ключей.")
    max_depth: int = Field(5, ge=0, description="Максимальная глубина обхода ссылок.")
    max_pages: int = Field(2000, ge=1, description="Жесткий лимит по числу страниц.")
    concurrency: int = Field(3, ge=1, description="Число вкладок браузера.")
    delay: float = Field(0.5, ge=0, description="Пауза после каждого URL (секунд).")
    nav_timeout: float = Field(30.0, gt=0, description="Таймаут навигации (секунд).")
    fetch_timeout: float = Field(10.0, gt=0, description="Таймаут на один HTTP-запрос (секунд).")
    fetch_retries: int = Field(1, ge=0, description="Повторы HTTP-запроса при 429/5xx.")
    retry_limit: int = Field(1, ge=0, description="Повторы снятия скриншота.")
    user_agent: str = Field("SiteShotBot/1.0", min_length=1, description="Заголовок User-Agent.")
    viewport_width: int = Field(1280, ge=200)
    viewport_height: int = Field(800, ge=200)
    image_ext: str = Field(".png", pattern=r"^\.[A-Za-z0-9]+$")
    safe_key_length: int = Field(120, ge=16, description="Максимальная длина SafeKey.")
    hashed_keys: bool = Field(False, description="Добавлять хэш полного URL к SafeKey.")

    @field_validator("base_url", mode="before")
    def _strip_trailing_slash(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.rstrip("/")
        return v

    @property
    def root(self) -> str:
        """Корневой URL без завершающего слэша, как строка."""
        return str(self.base_url).rstrip("/")

    @property
    def done_log(self) -> Path:
        return self.log_path if self.log_path is not None else self.output_dir / _LOG_NAME

    @property
    def delay_ms(self) -> int:
        return int(self.delay * 1000)


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


def _read_config_file(path: Union[str, Path]) -> dict[str, Any]:
    path_obj = Path(path).expanduser().resolve()
    if not path_obj.is_file():
        raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        return _read_yaml(path_obj)
    if suffix == ".json":
        return _read_json(path_obj)
    raise ValueError(f"Неподдерживаемый формат конфига: {suffix}")


def load_config(path: Union[str, Path]) -> ShotConfig:
    """
    Читает YAML или JSON и возвращает проверенный объект ShotConfig.
    При отсутствии файла бросает FileNotFoundError, при ошибке схемы ValidationError.
    """
    return ShotConfig(**_read_config_file(path))


def build_config(path: Union[str, Path, None] = None, **overrides: Any) -> ShotConfig:
    """Собирает конфиг из файла (если указан) и непустых переопределений CLI."""
    data: dict[str, Any] = _read_config_file(path) if path is not None else {}
    data.update({k: v for k, v in overrides.items() if v is not None})
    return ShotConfig(**data)
