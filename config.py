import os
from dotenv import load_dotenv
load_dotenv()

# Used by the HTTP surface; the CLI reads INPUT_GITHUB_TOKEN per invocation.
GITHUB_TOKEN = os.getenv("GITHUB_TOKEN")

GITHUB_API = os.getenv("GITHUB_API_URL", "https://api.github.com")
HTTP_TIMEOUT = int(os.getenv("HTTP_TIMEOUT", "25"))

# Linear backoff: attempt n waits n * RETRY_DELAY_SECONDS before the next try.
RETRY_DELAY_SECONDS = float(os.getenv("RETRY_DELAY_SECONDS", "1"))

DEFAULT_PAGE_SIZE = 50
DEFAULT_RETRY_ATTEMPTS = 3
DEFAULT_BRANCH_FALLBACK = "main"

# Key written to the GITHUB_OUTPUT file:
#   last_success_sha=<sha>
OUTPUT_KEY = "last_success_sha"

USER_AGENT = "last-green-sha"
