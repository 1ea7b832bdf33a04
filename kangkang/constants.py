"""常量和配置定义"""

# API 相关常量
DEFAULT_BASE_URL = "https://api.groq.com/openai/v1"
DEFAULT_MODEL = "llama-3.1-8b-instant"
DEFAULT_TIMEOUT = 15.0
TEMPERATURE = 0

# 密钥格式：Groq 的密钥都以此前缀开头
CREDENTIAL_PREFIX = "gsk_"

# 连续失败达到该次数后要求重新输入密钥
FAILURE_THRESHOLD = 5

# 本地存储
DEFAULT_HOME_DIRNAME = ".kangkang"
CONFIG_FILENAME = "config.json"
CONFIG_KEY_FIELD = "key"
IV_SIZE = 16

# 汉字范围（基本区）
IDEOGRAPH_FIRST = "\u4e00"
IDEOGRAPH_LAST = "\u9fff"

# 快捷键（pynput 语法）
DEFAULT_HOTKEY_TRANSLATE = "<cmd>+d"
DEFAULT_HOTKEY_REPAIR = "<cmd>+<alt>+k"

# 提示词
SYSTEM_PROMPT = "Dịch Trung ↔ Việt. Không giải thích."
PROMPT_TO_CHINESE = "Dịch sang tiếng Trung:\n{text}"
PROMPT_TO_VIETNAMESE = "Dịch sang tiếng Việt:\n{text}"

# 界面文案（越南语）
APP_TITLE = "Kang Kang AI"
MESSAGES = {
    'translate_failed': "❌ Bảo Bối AI lỗi dùi khum dịch đượt",
    'loading': "⏳ Đang dịch…",
    'repair_title': "🔑 Nhập API Key",
    'repair_invalid': f"❌ API key phải bắt đầu bằng {CREDENTIAL_PREFIX}",
    'repair_save_failed': "❌ Không lưu được API key, thử lại nhé",
    'repair_saved_mark': "✅",
    'repair_saved': "Bảo Bối Save API key okela dùi",
    'save': "Save",
    'cancel': "Cancel",
    'quit': "Quit",
    'hint_translate': "⌘ + D : Dịch",
    'hint_repair': "⌘ + ⌥ + K : Đổi API key",
}
