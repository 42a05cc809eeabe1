"""
hand_replay - 无限注德州扑克手牌复盘与分析引擎.

分层结构:
    core: 纯领域逻辑（牌组、牌型评估、胜率模拟、行动日志、下注轮状态机、快照投影）
    application: 命令/查询服务、配置、回放控制和文本导出
    ui: 命令行入口
"""

__version__ = "1.0.0"
