# config.py
# Edit these values directly or override them through the environment
import os

HOST = os.getenv("SQLPG_HOST", "0.0.0.0")
PORT = int(os.getenv("SQLPG_PORT", "3000"))

# Seconds sqlite waits on a locked database before giving up
QUERY_TIMEOUT = float(os.getenv("SQLPG_QUERY_TIMEOUT", "30"))

# LLM used for natural language -> SQL
LLM_MODEL = os.getenv("SQLPG_LLM_MODEL", "gpt-4o-mini")
LLM_TEMPERATURE = float(os.getenv("SQLPG_LLM_TEMPERATURE", "0.0"))
LLM_MAX_TOKENS = int(os.getenv("SQLPG_LLM_MAX_TOKENS", "800"))

# Uploaded CSV files are always exposed under this table name
CSV_TABLE_NAME = "uploaded_csv"
# Sample rows from the uploaded CSV shown to the LLM
CSV_PROMPT_SAMPLE_ROWS = 3

DELETE_CONFIRMATION_TOKEN = "CONFIRM_DELETE"

# Schema cache TTL (seconds)
SCHEMA_CACHE_TTL = 300

# Generation audit trail (set SQLPG_AUDIT_LOG="" to disable)
AUDIT_LOG_PATH = os.getenv("SQLPG_AUDIT_LOG", "sqlpg_audit.log") or None

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
