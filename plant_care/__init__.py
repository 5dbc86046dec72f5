"""植物养护：养护提醒引擎与 AI 植物信息缓存。"""
__version__ = "0.1.0"
