"""
配置管理器 - 读取和管理农场配置
"""
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .results import DataError

logger = logging.getLogger(__name__)


class ConfigManager:
    """
    配置管理器

    用于读取外部传入的配置或使用默认配置
    配置格式为扁平结构: {"key": value, ...}
    """

    # 默认配置（扁平结构）
    DEFAULT_CONFIG = {
        "tick_interval": 1,            # 生长刷新间隔（秒）
        "autosave_interval": 30,       # 脏存档落盘间隔（秒）
        "plot_count": 18,
        "pest_probability": 0.004,     # 每次刷新的虫害概率
        "weed_probability": 0.0,       # 装饰性杂草概率，0 为关闭
        "pests_block_harvest": True,
        "fertilizer_cost": 50,
        "zeta_exchange_rate": 20,      # 金币:ZETA
        "ticket_exchange_rate": 50,    # 金币:奖券
        "draw_ticket_cost": 1,
        "max_draws": 100,
        "log_limit": 50,
        "starting_inventory": {"radish": 1},
        "data_dir": None,
    }

    _instance: Optional['ConfigManager'] = None
    _config: Dict[str, Any] = {}

    def __new__(cls):
        """单例模式"""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._config = dict(cls.DEFAULT_CONFIG)
        return cls._instance

    @classmethod
    def get_instance(cls) -> 'ConfigManager':
        """获取配置管理器实例"""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    def load_config(self, config: Dict[str, Any]) -> None:
        """
        加载配置

        Args:
            config: 配置字典（扁平结构），未知键会被忽略
        """
        if not config:
            return
        for key, value in config.items():
            if key not in self.DEFAULT_CONFIG:
                logger.warning(f"忽略未知配置项: {key}")
                continue
            self._config[key] = value

    def load_file(self, path: Union[str, Path]) -> None:
        """从 JSON 文件加载配置"""
        p = Path(path)
        try:
            raw = json.loads(p.read_text(encoding='utf-8'))
        except (OSError, json.JSONDecodeError) as e:
            raise DataError(f"读取配置失败 {p}: {e}") from e
        if not isinstance(raw, dict):
            raise DataError(f"配置文件必须是对象: {p}")
        self.load_config(raw)

    def reset(self) -> None:
        """恢复默认配置"""
        self._config = dict(self.DEFAULT_CONFIG)

    def get(self, key: str, default: Any = None) -> Any:
        """
        获取配置值

        Args:
            key: 配置键名
            default: 默认值

        Returns:
            配置值
        """
        return self._config.get(key, default)

    @property
    def tick_interval(self) -> int:
        return int(self._config.get("tick_interval", 1))

    @property
    def autosave_interval(self) -> int:
        return int(self._config.get("autosave_interval", 30))

    @property
    def plot_count(self) -> int:
        return int(self._config.get("plot_count", 18))

    @property
    def pest_probability(self) -> float:
        return float(self._config.get("pest_probability", 0.004))

    @property
    def weed_probability(self) -> float:
        return float(self._config.get("weed_probability", 0.0))


# 全局配置实例
config = ConfigManager.get_instance()


def get_config() -> ConfigManager:
    """获取配置管理器"""
    return config


def configure_logging(level: int = logging.INFO) -> None:
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
