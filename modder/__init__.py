"""
modder - Minecraft 模组配置档管理工具
"""

__version__ = "1.0.0"
