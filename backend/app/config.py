"""
Runtime configuration.
Values come from environment variables (optionally via a .env file).
"""

import os
from dotenv import load_dotenv

load_dotenv()

# Resume pipeline
RESUME_MAX_CHARS = int(os.getenv("RESUME_MAX_CHARS", "12000"))
RESUME_FETCH_TIMEOUT = float(os.getenv("RESUME_FETCH_TIMEOUT", "20"))

# Screening model (Claude)
ANTHROPIC_API_KEY = os.getenv("ANTHROPIC_API_KEY")
SCREENING_MODEL = os.getenv("SCREENING_MODEL", "claude-sonnet-4-5-20250929")
SCREENING_MAX_TOKENS = int(os.getenv("SCREENING_MAX_TOKENS", "4096"))
