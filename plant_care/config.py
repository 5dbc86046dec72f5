"""植物养护全局配置与路径。"""
import os
from pathlib import Path

# 项目根目录（plant_care 包所在目录的上一级）
ROOT_DIR = Path(__file__).resolve().parent.parent
# 数据目录：键值存储文件
DATA_DIR = ROOT_DIR / "data"
STORAGE_DIR = DATA_DIR / "storage"
STORAGE_FILENAME = "storage.json"

# 存储键
REMINDERS_KEY = "SPROUT_CARE_REMINDERS"
SAVED_PLANTS_KEY = "@saved_plants"
PLANT_INFO_CACHE_KEY = "@PlantCare:geminiCache"

# AI 信息缓存
CACHE_MAX_ITEMS = 50
CACHE_EXPIRY_DAYS = 7
CACHE_KEEP_RATIO = 0.9  # 超限时淘汰到上限的 90%

# 孤儿提醒清理轮询间隔（秒）
ORPHAN_POLL_INTERVAL = 1.0

# 到期提示：剩余天数不超过该值视为「即将到期」
DUE_SOON_DAYS = 2

# Gemini
GEMINI_API_KEY = os.environ.get("GEMINI_API_KEY", "").strip()
GEMINI_MODEL = os.environ.get("GEMINI_MODEL", "gemini-1.5-flash").strip()
GEMINI_ENDPOINT = "https://generativelanguage.googleapis.com/v1beta/models"
GEMINI_TIMEOUT = 60


def ensure_dirs() -> None:
    """确保数据目录存在。"""
    for d in (DATA_DIR, STORAGE_DIR):
        d.mkdir(parents=True, exist_ok=True)
