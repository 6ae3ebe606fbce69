"""
数据管理器 - 使用 JSON 文件存储玩家存档，支持异步操作防止事件循环阻塞
"""
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import aiofiles

from .results import DataError

logger = logging.getLogger(__name__)

DEFAULT_ROOT = Path(os.getenv("FARMSTEAD_DATA_DIR", Path.cwd() / "data"))


class DataManager:
    """
    数据管理器 - JSON 文件存储

    每个玩家一个存档文件: {root}/saves/{user_id}.json

    用法:
        dm = DataManager(base_path=tmp_path)
        dm.save_user('123', {'coins': 10})
        user = dm.load_user('123')

        # 异步方法
        user = await dm.async_load_user('123')
        await dm.async_save_user('123', user)
    """

    def __init__(self, base_path: Optional[Path] = None):
        self.root = Path(base_path) if base_path else DEFAULT_ROOT
        self.root.mkdir(parents=True, exist_ok=True)
        self.saves_dir = self.root / "saves"
        self.saves_dir.mkdir(parents=True, exist_ok=True)

    def _save_file(self, user_id: str) -> Path:
        return self.saves_dir / f"{user_id}.json"

    # ========== 同步方法 ==========
    def load_user(self, user_id: str) -> Optional[Dict[str, Any]]:
        """同步加载玩家存档，不存在返回 None"""
        p = self._save_file(user_id)
        if not p.exists():
            return None
        return self._decode(p, p.read_text(encoding="utf-8"))

    def save_user(self, user_id: str, data: Dict[str, Any]):
        """同步保存玩家存档（先写临时文件再替换）"""
        p = self._save_file(user_id)
        tmp = p.with_suffix(".json.tmp")
        tmp.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
        os.replace(tmp, p)

    # ========== 异步方法 ==========
    async def async_load_user(self, user_id: str) -> Optional[Dict[str, Any]]:
        """异步加载玩家存档"""
        p = self._save_file(user_id)
        if not p.exists():
            return None
        async with aiofiles.open(p, 'r', encoding='utf-8') as f:
            content = await f.read()
        return self._decode(p, content)

    async def async_save_user(self, user_id: str, data: Dict[str, Any]):
        """异步保存玩家存档"""
        p = self._save_file(user_id)
        tmp = p.with_suffix(".json.tmp")
        content = json.dumps(data, ensure_ascii=False, indent=2)
        async with aiofiles.open(tmp, 'w', encoding='utf-8') as f:
            await f.write(content)
        os.replace(tmp, p)

    def list_users(self) -> List[str]:
        """列出所有玩家ID"""
        return sorted(p.stem for p in self.saves_dir.glob("*.json"))

    def delete_user(self, user_id: str) -> bool:
        p = self._save_file(user_id)
        if not p.exists():
            return False
        p.unlink()
        return True

    # ========== 内部方法 ==========
    def _decode(self, path: Path, content: str) -> Dict[str, Any]:
        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            logger.error(f"存档损坏 {path}: {e}")
            raise DataError(f"存档损坏: {path}") from e
        if not isinstance(data, dict):
            logger.error(f"存档格式错误 {path}")
            raise DataError(f"存档格式错误: {path}")
        return data

    def get_data_path(self) -> Path:
        """获取数据根目录"""
        return self.root
