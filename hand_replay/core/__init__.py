"""
hand_replay 核心领域层.

纯Python实现，不依赖application/ui层。所有派生状态都是行动日志前缀的纯函数.
"""
