"""
どこで: `src/cmdpanel/__main__.py`。
何を: `python -m cmdpanel MODULE ...` でモジュールを探索対象にしてコンソールを起動する。
なぜ: コマンド定義側のコードを書き換えずに、外からコンソールを開けるようにするため。
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="cmdpanel",
        description="@command で登録した関数をフォームから実行するコンソールを開く。",
    )
    parser.add_argument(
        "modules",
        nargs="*",
        help="探索前に import するモジュール名（config の discovery.modules に追加される）",
    )
    parser.add_argument("--config", default=None, help="config.yaml のパス")
    parser.add_argument("--fps", type=float, default=None, help="目標フレームレート")
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="ログレベル",
    )
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(level=getattr(logging, str(args.log_level)))

    from cmdpanel.api.runner import run

    run(args.modules, config_path=args.config, fps=args.fps)
    return 0


if __name__ == "__main__":
    sys.exit(main())
