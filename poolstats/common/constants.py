"""Shared constants for the pool statistics collector."""

# Environment variables (read once at startup)
ENV_TOKEN = "ADO_TOKEN"
ENV_URL = "ADO_URL"

# Input / output locations, relative to the working directory
POOLS_FILE = "pools.json"
OUTPUT_DIR = "pools"
DOTENV_FILE = ".env"

# Shared by every pool log file of a run, e.g. 2024-03-01_14-05-09
TIMESTAMP_FORMAT = "%Y-%m-%d_%H-%M-%S"

# Seconds to wait after each pool before the next one
POOL_DELAY_SECS = 5.0

# ── distributedtask endpoints ───────────────────────────────────────────────
AGENTS_PATH = "/_apis/distributedtask/pools/{pool_id}/agents?includeAssignedRequest=true"
JOB_REQUESTS_PATH = "/_apis/distributedtask/pools/{pool_id}/jobrequests"
