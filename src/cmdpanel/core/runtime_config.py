# どこで: `src/cmdpanel/core/runtime_config.py`。
# 何を: config.yaml による実行時設定（探索・ロード・キャッシュ）を提供する。
# なぜ: 探索対象モジュールや履歴サイズを、コードを変えずにプロジェクト/ユーザー単位で指定できるようにするため。

from __future__ import annotations

from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Any

from .history import clamp_history_size
from .value_store import ISOLATION_MODES


@dataclass(frozen=True, slots=True)
class RuntimeConfig:
    """cmdpanel の実行時設定。"""

    config_path: Path | None
    modules: tuple[str, ...]
    strict_overrides: bool
    history_size: int
    value_store_isolation: str
    window_size: tuple[int, int]
    window_position: tuple[int, int]
    fps: float


_EXPLICIT_CONFIG_PATH: Path | None = None
_CONFIG_CACHE: RuntimeConfig | None = None


def set_config_path(path: str | Path | None) -> None:
    """以降の設定探索で使う明示 config パスを設定する。

    Notes
    -----
    `path` を None にすると明示指定を解除し、既定の探索に戻る。
    """

    global _EXPLICIT_CONFIG_PATH, _CONFIG_CACHE
    if path is None:
        _EXPLICIT_CONFIG_PATH = None
        _CONFIG_CACHE = None
        return
    _EXPLICIT_CONFIG_PATH = Path(str(path)).expanduser()
    _CONFIG_CACHE = None


def _default_config_candidates() -> tuple[Path, ...]:
    cwd = Path.cwd()
    home = Path.home()
    return (
        cwd / ".cmdpanel" / "config.yaml",
        home / ".config" / "cmdpanel" / "config.yaml",
    )


def _as_mapping(value: Any, *, key: str) -> dict[str, Any]:
    if value is None:
        return {}
    if isinstance(value, dict):
        return dict(value)
    raise RuntimeError(f"{key} は mapping である必要があります: got={value!r}")


def _as_str_list(value: Any, *, key: str) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [s for s in (p.strip() for p in value.split(",")) if s]
    if not isinstance(value, list):
        raise RuntimeError(f"{key} は文字列の配列である必要があります: got={value!r}")
    return [str(v).strip() for v in value if str(v).strip()]


def _as_int_pair(value: Any, *, key: str) -> tuple[int, int] | None:
    if value is None:
        return None
    try:
        seq = list(value)
    except Exception as exc:
        raise RuntimeError(f"{key} は [x, y] の配列である必要があります: got={value!r}") from exc
    if len(seq) != 2:
        raise RuntimeError(f"{key} は [x, y] の配列である必要があります: got={value!r}")
    try:
        return (int(seq[0]), int(seq[1]))
    except Exception as exc:
        raise RuntimeError(f"{key} は [x, y] の整数配列である必要があります: got={value!r}") from exc


def _as_bool(value: Any, *, key: str) -> bool | None:
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    raise RuntimeError(f"{key} は true/false である必要があります: got={value!r}")


def _as_int(value: Any, *, key: str) -> int | None:
    if value is None:
        return None
    if isinstance(value, bool):
        raise RuntimeError(f"{key} は整数である必要があります: got={value!r}")
    try:
        return int(value)
    except Exception as exc:
        raise RuntimeError(f"{key} は整数である必要があります: got={value!r}") from exc


def _as_float(value: Any, *, key: str) -> float | None:
    if value is None:
        return None
    try:
        return float(value)
    except Exception as exc:
        raise RuntimeError(f"{key} は数値である必要があります: got={value!r}") from exc


def _load_yaml_text(text: str, *, source: str) -> dict[str, Any]:
    import yaml  # type: ignore[import-untyped]

    try:
        data = yaml.safe_load(text)
    except Exception as exc:
        raise RuntimeError(f"config.yaml の読み込みに失敗しました: source={source}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise RuntimeError(f"config.yaml は mapping である必要があります: source={source}")

    return dict(data)


def _load_yaml_config(path: Path) -> dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    return _load_yaml_text(text, source=str(path))


def _load_packaged_default_config() -> dict[str, Any]:
    """同梱デフォルト config をロードして dict を返す。"""

    try:
        blob = (
            resources.files("cmdpanel")
            .joinpath("resource", "default_config.yaml")
            .read_text(encoding="utf-8")
        )
    except Exception as exc:  # pragma: no cover
        raise RuntimeError(
            "同梱 default_config.yaml の読み込みに失敗しました"
            "（パッケージ配布物の package-data を確認してください）"
        ) from exc

    return _load_yaml_text(blob, source="cmdpanel/resource/default_config.yaml")


def _merge_sections(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """トップレベルのセクション単位で後勝ちマージする（セクション内はキー単位）。"""

    out = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(out.get(key), dict):
            merged = dict(out[key])
            merged.update(value)
            out[key] = merged
        else:
            out[key] = value
    return out


def _require(value: Any, key: str) -> Any:
    if value is None:
        raise RuntimeError(f"{key} が未設定です（同梱 default_config.yaml を確認してください）")
    return value


def config_from_payload(payload: dict[str, Any], *, config_path: Path | None = None) -> RuntimeConfig:
    """マージ済みの dict を検証して RuntimeConfig を返す。"""

    version = payload.get("version")
    if version is None:
        raise RuntimeError(
            "config.yaml の version が未設定です（同梱 default_config.yaml を確認してください）"
        )
    try:
        version_i = int(version)
    except Exception as exc:
        raise RuntimeError(f"config.yaml の version は整数である必要があります: got={version!r}") from exc
    if version_i != 1:
        raise RuntimeError(f"未対応の config.yaml version です: got={version_i}")

    discovery = _as_mapping(payload.get("discovery"), key="discovery")
    modules = _as_str_list(discovery.get("modules"), key="discovery.modules")
    strict = _as_bool(discovery.get("strict_overrides"), key="discovery.strict_overrides")

    history = _as_mapping(payload.get("history"), key="history")
    history_size = _require(_as_int(history.get("size"), key="history.size"), "history.size")

    value_store = _as_mapping(payload.get("value_store"), key="value_store")
    isolation = str(_require(value_store.get("isolation"), "value_store.isolation"))
    if isolation not in ISOLATION_MODES:
        raise ValueError(
            f"value_store.isolation は {ISOLATION_MODES} のいずれか: got={isolation!r}"
        )

    ui = _as_mapping(payload.get("ui"), key="ui")
    window_size = _require(_as_int_pair(ui.get("window_size"), key="ui.window_size"), "ui.window_size")
    window_position = _require(
        _as_int_pair(ui.get("window_position"), key="ui.window_position"),
        "ui.window_position",
    )
    fps = _require(_as_float(ui.get("fps"), key="ui.fps"), "ui.fps")

    return RuntimeConfig(
        config_path=config_path,
        modules=tuple(modules),
        strict_overrides=bool(strict),
        history_size=clamp_history_size(history_size),
        value_store_isolation=isolation,
        window_size=window_size,
        window_position=window_position,
        fps=float(fps),
    )


def runtime_config() -> RuntimeConfig:
    """実行時設定をロードして返す（キャッシュ）。

    上書き順（後勝ち）:
    1) 同梱 default_config.yaml
    2) `./.cmdpanel/config.yaml` / `~/.config/cmdpanel/config.yaml`（先に見つかった方）
    3) `set_config_path()` で指定したパス
    """

    global _CONFIG_CACHE
    if _CONFIG_CACHE is not None:
        return _CONFIG_CACHE

    explicit_path = _EXPLICIT_CONFIG_PATH
    if explicit_path is not None and not explicit_path.is_file():
        raise FileNotFoundError(f"config.yaml が見つかりません: {explicit_path}")

    discovered_path: Path | None = None
    for p in _default_config_candidates():
        if p.is_file():
            discovered_path = p
            break

    payload = _load_packaged_default_config()
    if discovered_path is not None:
        payload = _merge_sections(payload, _load_yaml_config(discovered_path))
    if explicit_path is not None:
        payload = _merge_sections(payload, _load_yaml_config(explicit_path))

    cfg = config_from_payload(payload, config_path=explicit_path or discovered_path)
    _CONFIG_CACHE = cfg
    return cfg


__all__ = ["RuntimeConfig", "config_from_payload", "runtime_config", "set_config_path"]
