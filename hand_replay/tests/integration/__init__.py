"""Integration Tests - 集成测试"""
