"""
SwipeKeys Application Module

Configuration and the keyboard session tying input to prediction.
"""
from .config import Config, load_config, save_config
from .session import KeyboardSession

__all__ = [
    'Config',
    'load_config',
    'save_config',
    'KeyboardSession',
]
