import os

from dotenv import find_dotenv, load_dotenv

from ledger_categorizer.logger import get_logger

logger = get_logger(__name__)


CONFIG_FILENAME = "config.yaml"

DEFAULT_AIML_MODEL = "claude-sonnet-4-5"
DEFAULT_AIML_BASE_URL = "https://api.aimlapi.com/v1"
DEFAULT_AI_BATCH_SIZE = 30
DEFAULT_AI_TIMEOUT = 60.0

_CONFIG_FILE_PATH: str | None = None

_CONFIG_KEYS = (
    "LOG_LEVEL",
    "AIML_API_KEY",
    "AIML_MODEL",
    "AIML_BASE_URL",
    "AI_BATCH_SIZE",
    "AI_TIMEOUT",
    "DATA_DIR",
    "LOG_DIR",
)


def _resolve_dotenv_path() -> str | None:
    config_dir = os.getenv("CONFIG_DIR")
    if config_dir:
        candidate = os.path.join(config_dir, ".env")
        if os.path.exists(candidate):
            return candidate
    resolved = find_dotenv(usecwd=True)
    return resolved or None


def _resolve_config_path() -> str:
    config_dir = os.getenv("CONFIG_DIR")
    if config_dir:
        return os.path.join(config_dir, CONFIG_FILENAME)
    cwd = os.getcwd()
    candidate = os.path.join(cwd, "config", CONFIG_FILENAME)
    if os.path.exists(candidate):
        return candidate
    return os.path.join(cwd, CONFIG_FILENAME)


def _unquote_value(raw_value: str) -> str:
    if len(raw_value) >= 2 and raw_value[0] == raw_value[-1] and raw_value[0] in {'"', "'"}:
        return raw_value[1:-1]
    return raw_value


def read_config_file(path: str | None) -> dict[str, str]:
    """Read a flat ``KEY: value`` file. Nested YAML is not supported."""
    if not path or not os.path.exists(path):
        return {}

    values: dict[str, str] = {}
    with open(path, encoding="utf-8") as handle:
        for line in handle:
            stripped = line.strip()
            if not stripped or stripped.startswith("#") or ":" not in stripped:
                continue
            key, raw_value = stripped.split(":", 1)
            key = key.strip()
            if not key:
                continue
            # Inline comments need a leading space; values may contain "#".
            cleaned = raw_value.split(" #", 1)[0].strip()
            value = _unquote_value(cleaned)
            if value:
                values[key] = value
    return values


def load_environment() -> None:
    global _CONFIG_FILE_PATH

    dotenv_path = _resolve_dotenv_path()
    if dotenv_path:
        load_dotenv(dotenv_path=dotenv_path, override=False)

    _CONFIG_FILE_PATH = _resolve_config_path()
    file_values = read_config_file(_CONFIG_FILE_PATH)

    for key in _CONFIG_KEYS:
        if key not in os.environ and key in file_values:
            os.environ[key] = file_values[key]


def get_config_path() -> str | None:
    return _CONFIG_FILE_PATH


def ensure_dirs(*paths: str | None) -> None:
    for path in paths:
        if path and path not in {".", "./"}:
            os.makedirs(path, exist_ok=True)


def get_env_int(name: str, default: int, min_value: int | None = None) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("[ENV] Invalid %s='%s', using default %s.", name, raw, default)
        return default
    if min_value is not None and value < min_value:
        logger.warning(
            "[ENV] %s='%s' below minimum %s, using default %s.",
            name,
            raw,
            min_value,
            default,
        )
        return default
    return value


def get_env_float(name: str, default: float = 0.0) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("[ENV] Invalid %s='%s', using default %s.", name, raw, default)
        return default


def get_ai_api_key() -> str | None:
    return os.getenv("AIML_API_KEY") or None


def get_ai_model() -> str:
    return os.getenv("AIML_MODEL") or DEFAULT_AIML_MODEL


def get_ai_base_url() -> str:
    return os.getenv("AIML_BASE_URL") or DEFAULT_AIML_BASE_URL


def get_ai_batch_size() -> int:
    return get_env_int("AI_BATCH_SIZE", DEFAULT_AI_BATCH_SIZE, min_value=1)


def get_ai_timeout() -> float:
    return get_env_float("AI_TIMEOUT", DEFAULT_AI_TIMEOUT)


_SENSITIVE_ENV_KEYS = ("KEY", "TOKEN", "SECRET", "PASSWORD")


def _mask_env_value(name: str, value: str) -> str:
    sanitized = value.replace("\r", "\\r").replace("\n", "\\n")
    upper_name = name.upper()
    if not any(marker in upper_name for marker in _SENSITIVE_ENV_KEYS):
        return sanitized
    if len(sanitized) <= 4:
        return "****"
    return f"{sanitized[:2]}...{sanitized[-2:]}"


def log_environment() -> None:
    logger.info("[ENV] Logging configured environment variables (masked where needed).")
    for key in _CONFIG_KEYS:
        raw_value = os.getenv(key)
        value = "<unset>" if raw_value is None else _mask_env_value(key, raw_value)
        logger.info("[ENV] %s=%s", key, value)


load_environment()

DATA_DIR = os.getenv("DATA_DIR", ".")
LOG_DIR = os.getenv("LOG_DIR")
CONFIG_DIR = os.getenv("CONFIG_DIR")

ensure_dirs(DATA_DIR, LOG_DIR, CONFIG_DIR)
