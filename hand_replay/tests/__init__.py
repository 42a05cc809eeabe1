"""
Hand Replay Tests - 测试框架

Test Categories:
    unit/: 单元测试 - 测试单个模块功能
    property/: 性质测试 - 验证筹码守恒、牌型排序等不变量
    integration/: 集成测试 - 完整手牌的录入、回放和导出
    anti_cheat/: 反作弊检查 - 确保测试使用真实的核心对象
"""
