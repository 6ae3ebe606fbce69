"""
本地模拟权威 - 在 asyncio 事件循环上运行定时刷新
"""
import argparse
import asyncio
import logging
from pathlib import Path

from farmstead.common.config_manager import configure_logging, get_config
from farmstead.common.data_manager import DataManager
from farmstead.game import FarmGame

logger = logging.getLogger(__name__)


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Run the farm simulation authority.")
    parser.add_argument("--data-dir", type=Path, default=None, help="Save directory")
    parser.add_argument("--config", type=Path, default=None, help="JSON config file")
    parser.add_argument("--player", action="append", default=[], help="Player to load (repeatable)")
    parser.add_argument("--verbose", action="store_true")
    return parser


async def run(args: argparse.Namespace):
    config = get_config()
    if args.config:
        config.load_file(args.config)
    data_dir = args.data_dir or config.get('data_dir')
    game = FarmGame(data_manager=DataManager(data_dir) if data_dir else None, config=config)

    players = args.player or game.data_manager.list_users()
    for user_id in players:
        result = game.login(user_id)
        logger.info(f"玩家 {user_id} 已加载，离线收益 {result.data.get('coins', 0)} 金币")

    game.start()
    try:
        await asyncio.Event().wait()
    finally:
        game.shutdown()


def main():
    args = build_arg_parser().parse_args()
    configure_logging(logging.DEBUG if args.verbose else logging.INFO)
    try:
        asyncio.run(run(args))
    except KeyboardInterrupt:
        logger.info("已退出")


if __name__ == "__main__":
    main()
