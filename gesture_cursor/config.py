"""
Configuration management for the gesture cursor.
"""
import copy
import yaml
from pathlib import Path
from typing import Optional, Dict, Any, Union
from dataclasses import dataclass

from .errors import ConfigError

DEFAULT_CONFIG_PATH = Path(__file__).parent / "config.default.yaml"


@dataclass
class CameraConfig:
    """Camera configuration settings."""
    index: int
    width: int
    height: int
    fps: int
    mirror: bool


@dataclass
class ClassifierConfig:
    """MediaPipe GestureRecognizer settings."""
    model_asset_path: str
    num_hands: int
    min_hand_detection_confidence: float
    min_hand_presence_confidence: float
    min_tracking_confidence: float
    delegate: str
    fallback_heuristics: bool


@dataclass
class FilterConfig:
    """Positional filter settings."""
    alpha: float


@dataclass
class PointerConfig:
    """Pointer / dwell click settings."""
    gesture: str
    dwell_threshold: float
    dwell_time_ms: float
    refractory_ms: float


@dataclass
class ScrollConfig:
    """Closed-fist drag scroll settings."""
    gesture: str
    velocity_threshold: float
    reset_threshold: float
    multiplier: float
    velocity_decay: float


@dataclass
class IdentityConfig:
    """Hand identity assignment across frames."""
    policy: str
    max_match_distance: float
    max_missing_ms: float


@dataclass
class EngineConfig:
    """Tick scheduling settings."""
    target_fps: int
    frame_budget_ms: float


@dataclass
class DisplayConfig:
    """Display configuration settings."""
    show_window: bool
    show_landmarks: bool
    show_cursor: bool
    show_dwell_ring: bool
    show_status: bool
    window_name: str


@dataclass
class LoggingConfig:
    level: str
    format: str


@dataclass
class Cfg:
    """Main configuration class."""
    camera: CameraConfig
    classifier: ClassifierConfig
    filter: FilterConfig
    pointer: PointerConfig
    scroll: ScrollConfig
    identity: IdentityConfig
    engine: EngineConfig
    display: DisplayConfig
    logging: LoggingConfig


def load_config(path: Optional[Union[str, Path]] = None) -> Cfg:
    """
    Load configuration from a YAML file.

    The shipped defaults are always loaded first; the file at ``path`` only
    needs to contain the keys it overrides.

    Args:
        path: Path to an override file. If None, only the defaults are used.

    Returns:
        Configuration object with all settings

    Raises:
        FileNotFoundError: if ``path`` does not exist
        ConfigError: if a value is out of range
    """
    data = _read_yaml(DEFAULT_CONFIG_PATH)

    if path is not None:
        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
        data = _merge(data, _read_yaml(config_path))

    cfg = _dict_to_config(data)
    _validate(cfg)
    return cfg


def _read_yaml(path: Path) -> Dict[str, Any]:
    with open(path, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file must contain a mapping: {path}")
    return data


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge ``override`` into a copy of ``base``."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _dict_to_config(data: Dict[str, Any]) -> Cfg:
    """Convert dictionary to configuration object."""
    try:
        camera_data = data['camera']
        camera = CameraConfig(
            index=int(camera_data['index']),
            width=int(camera_data['width']),
            height=int(camera_data['height']),
            fps=int(camera_data['fps']),
            mirror=bool(camera_data['mirror'])
        )

        clf_data = data['classifier']
        classifier = ClassifierConfig(
            model_asset_path=str(clf_data['model_asset_path']),
            num_hands=int(clf_data['num_hands']),
            min_hand_detection_confidence=float(clf_data['min_hand_detection_confidence']),
            min_hand_presence_confidence=float(clf_data['min_hand_presence_confidence']),
            min_tracking_confidence=float(clf_data['min_tracking_confidence']),
            delegate=str(clf_data['delegate']).lower(),
            fallback_heuristics=bool(clf_data['fallback_heuristics'])
        )

        smoothing = FilterConfig(alpha=float(data['filter']['alpha']))

        pointer_data = data['pointer']
        pointer = PointerConfig(
            gesture=str(pointer_data['gesture']),
            dwell_threshold=float(pointer_data['dwell_threshold']),
            dwell_time_ms=float(pointer_data['dwell_time_ms']),
            refractory_ms=float(pointer_data['refractory_ms'])
        )

        scroll_data = data['scroll']
        scroll = ScrollConfig(
            gesture=str(scroll_data['gesture']),
            velocity_threshold=float(scroll_data['velocity_threshold']),
            reset_threshold=float(scroll_data['reset_threshold']),
            multiplier=float(scroll_data['multiplier']),
            velocity_decay=float(scroll_data['velocity_decay'])
        )

        identity_data = data['identity']
        identity = IdentityConfig(
            policy=str(identity_data['policy']).lower(),
            max_match_distance=float(identity_data['max_match_distance']),
            max_missing_ms=float(identity_data['max_missing_ms'])
        )

        engine_data = data['engine']
        engine = EngineConfig(
            target_fps=int(engine_data['target_fps']),
            frame_budget_ms=float(engine_data['frame_budget_ms'])
        )

        display_data = data['display']
        display = DisplayConfig(
            show_window=bool(display_data['show_window']),
            show_landmarks=bool(display_data['show_landmarks']),
            show_cursor=bool(display_data['show_cursor']),
            show_dwell_ring=bool(display_data['show_dwell_ring']),
            show_status=bool(display_data['show_status']),
            window_name=str(display_data['window_name'])
        )

        logging_data = data['logging']
        log_cfg = LoggingConfig(
            level=str(logging_data['level']).upper(),
            format=str(logging_data['format'])
        )
    except KeyError as e:
        raise ConfigError(f"Missing config key: {e}") from e
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid config value: {e}") from e

    return Cfg(
        camera=camera,
        classifier=classifier,
        filter=smoothing,
        pointer=pointer,
        scroll=scroll,
        identity=identity,
        engine=engine,
        display=display,
        logging=log_cfg
    )


def _validate(cfg: Cfg) -> None:
    if not 0.0 < cfg.filter.alpha <= 1.0:
        raise ConfigError(f"filter.alpha must be in (0, 1], got {cfg.filter.alpha}")
    if cfg.classifier.num_hands < 1:
        raise ConfigError("classifier.num_hands must be at least 1")
    if cfg.classifier.delegate not in ("cpu", "gpu"):
        raise ConfigError(f"classifier.delegate must be cpu or gpu, got {cfg.classifier.delegate}")

    positive = {
        "pointer.dwell_threshold": cfg.pointer.dwell_threshold,
        "pointer.dwell_time_ms": cfg.pointer.dwell_time_ms,
        "scroll.velocity_threshold": cfg.scroll.velocity_threshold,
        "scroll.reset_threshold": cfg.scroll.reset_threshold,
        "scroll.multiplier": cfg.scroll.multiplier,
        "identity.max_match_distance": cfg.identity.max_match_distance,
        "engine.target_fps": cfg.engine.target_fps,
        "engine.frame_budget_ms": cfg.engine.frame_budget_ms,
    }
    for name, value in positive.items():
        if value <= 0:
            raise ConfigError(f"{name} must be positive, got {value}")

    if cfg.pointer.refractory_ms < 0:
        raise ConfigError("pointer.refractory_ms must not be negative")
    if cfg.identity.max_missing_ms < 0:
        raise ConfigError("identity.max_missing_ms must not be negative")
    if not 0.0 <= cfg.scroll.velocity_decay < 1.0:
        raise ConfigError(f"scroll.velocity_decay must be in [0, 1), got {cfg.scroll.velocity_decay}")
    if cfg.identity.policy not in ("nearest", "index"):
        raise ConfigError(f"identity.policy must be nearest or index, got {cfg.identity.policy}")
