from autoheal.core.config import HealingConfig
from autoheal.core.healing import AutoHealing, healing_session

__all__ = ["AutoHealing", "HealingConfig", "healing_session"]
