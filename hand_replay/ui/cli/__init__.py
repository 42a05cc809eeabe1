"""
命令行界面

Classes:
    ReplayRenderer: 快照、胜率和底池赔率的文本渲染
    ReplayCLI: 命令行回放入口
"""

from .render import ReplayRenderer
from .replay_cli import ReplayCLI, build_parser, main

__all__ = ['ReplayRenderer', 'ReplayCLI', 'build_parser', 'main']
