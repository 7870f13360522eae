"""
Модуль для загрузки и валидации конфигурации зеркалирования SiteMirror.
Используется Pydantic для описания схемы и проверки данных.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, Mapping, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, HttpUrl, field_validator


class MirrorConfig(BaseModel):
    """Конфигурация одного запуска зеркалирования."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    seed_url: HttpUrl = Field(..., description="Стартовый URL зеркалируемого сайта.")
    output_dir: Path = Field(Path("output"), description="Корневая папка зеркала.")
    max_depth: int = Field(0, ge=0, description="Максимальная глубина рекурсии (0 = без ограничений).")
    concurrency: int = Field(10, ge=1, description="Максимум одновременных рекурсивных загрузок.")
    timeout: float = Field(30.0, gt=0, description="Таймаут на один запрос (секунд).")
    user_agent: str = Field("SiteMirror/1.0", min_length=1, description="Заголовок User-Agent.")
    strict_content_type: bool = Field(
        True,
        description="HTML только при Content-Type, строго равном 'text/html; charset=utf-8'.",
    )

    @field_validator("output_dir", mode="before")
    def _expand_user(cls, v: Any) -> Any:
        if isinstance(v, str):
            return Path(v).expanduser()
        return v


_DEFAULT_CFG = Path("configs/default.yaml")


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


def _read_config_file(path: Path) -> dict[str, Any]:
    suffix = path.suffix.lower()
    if suffix in (".yaml", ".yml"):
        return _read_yaml(path)
    if suffix == ".json":
        return _read_json(path)
    raise ValueError(f"Неподдерживаемый формат конфига: {suffix}")


def _resolve(path: Union[str, Path]) -> Path:
    path_obj = Path(path).expanduser().resolve()
    if not path_obj.is_file():
        raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))
    return path_obj


def load_config(path: Union[str, Path, None]) -> MirrorConfig:
    """
    Читает YAML или JSON и возвращает проверенный объект MirrorConfig.
    При отсутствии файла конфига бросает FileNotFoundError.
    """
    if path is None:
        if not _DEFAULT_CFG.exists():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(_DEFAULT_CFG))
        path_obj = _DEFAULT_CFG
    else:
        path_obj = _resolve(path)
    return MirrorConfig(**_read_config_file(path_obj))


def build_config(
    path: Union[str, Path, None] = None,
    overrides: Optional[Mapping[str, Any]] = None,
) -> MirrorConfig:
    """
    Собирает конфигурацию из файла (если есть) и переопределений из CLI.

    Значения ``None`` в ``overrides`` игнорируются, поэтому флаги, не
    указанные пользователем, не затирают значения из файла.
    """
    data: dict[str, Any] = {}
    if path is not None:
        data.update(_read_config_file(_resolve(path)))
    elif _DEFAULT_CFG.is_file():
        data.update(_read_config_file(_DEFAULT_CFG))
    for key, value in (overrides or {}).items():
        if value is not None:
            data[key] = value
    return MirrorConfig(**data)


__all__ = ["MirrorConfig", "load_config", "build_config"]
