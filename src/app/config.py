"""
Config loader for SwipeKeys.
Loads YAML configuration with dataclass validation.
"""
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Dict, List, Optional
import yaml


@dataclass
class KeyboardConfig:
    layout: str = "keys6"  # keys4, keys6, keys8, strokes2, msr


@dataclass
class GestureConfig:
    # A drag under both thresholds is a tap
    min_swipe_distance: float = 20.0
    min_swipe_velocity: float = 100.0
    velocity_lookahead: float = 0.1  # Seconds of velocity added to the translation


@dataclass
class PredictionConfig:
    engine: str = "custom"  # custom, lexicon, hybrid
    dictionary_path: Optional[str] = None  # CSV word,frequency
    lexicon_path: Optional[str] = None     # Falls back to the system word list
    cache_capacity: int = 1000
    cache_eviction_batch: int = 100
    max_suggestions: int = 4
    max_search_level: int = 4
    lexicon_limit: int = 10
    threaded: bool = True


@dataclass
class UserConfig:
    words: List[str] = field(default_factory=list)  # Newest first
    word_ratings: Dict[str, int] = field(default_factory=dict)


@dataclass
class LoggingConfig:
    level: str = "INFO"


@dataclass
class Config:
    keyboard: KeyboardConfig = field(default_factory=KeyboardConfig)
    gestures: GestureConfig = field(default_factory=GestureConfig)
    prediction: PredictionConfig = field(default_factory=PredictionConfig)
    user: UserConfig = field(default_factory=UserConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def _dict_to_dataclass(cls, data: dict):
    """Convert a dict to a dataclass, ignoring unknown keys."""
    if data is None:
        return cls()
    field_names = {f.name for f in cls.__dataclass_fields__.values()}
    filtered = {k: v for k, v in data.items() if k in field_names}
    return cls(**filtered)


def default_config_path() -> Path:
    return Path(__file__).parent.parent.parent / "config.yaml"


def load_config(config_path: Optional[Path] = None) -> Config:
    """
    Load configuration from YAML file.

    Args:
        config_path: Path to config file. If None, uses config.yaml in
                    the project root.

    Returns:
        Config dataclass with all settings; defaults if the file is missing.
    """
    config_path = Path(config_path) if config_path is not None else default_config_path()

    if not config_path.exists():
        return Config()

    with open(config_path, 'r') as f:
        data = yaml.safe_load(f) or {}

    config = Config(
        keyboard=_dict_to_dataclass(KeyboardConfig, data.get('keyboard')),
        gestures=_dict_to_dataclass(GestureConfig, data.get('gestures')),
        prediction=_dict_to_dataclass(PredictionConfig, data.get('prediction')),
        user=_dict_to_dataclass(UserConfig, data.get('user')),
        logging=_dict_to_dataclass(LoggingConfig, data.get('logging')),
    )
    # YAML nulls for the collections
    config.user.words = list(config.user.words or [])
    config.user.word_ratings = dict(config.user.word_ratings or {})
    return config


def save_config(config: Config, config_path: Optional[Path] = None):
    """Write the configuration back, including user words and ratings."""
    config_path = Path(config_path) if config_path is not None else default_config_path()
    with open(config_path, 'w') as f:
        yaml.safe_dump(asdict(config), f, default_flow_style=False, sort_keys=False)
