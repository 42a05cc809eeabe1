"""Property Tests - 基于hypothesis的性质测试"""
