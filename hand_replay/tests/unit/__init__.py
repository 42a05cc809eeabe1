"""
Unit Tests - 单元测试

每个核心模块和应用服务一个测试文件，断言前先用反作弊检查器确认对象来自hand_replay。
"""
