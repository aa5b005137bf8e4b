import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# Paths (local snapshots only; profile storage lives outside the engine)
DATA_DIR = Path("data")
DEFAULT_SNAPSHOT_PATH = DATA_DIR / "snapshot.json"

# LLM settings (Groq)
GROQ_API_KEY = os.getenv("GROQ_API_KEY")
GROQ_MODEL = os.getenv("GROQ_MODEL", "llama-3.3-70b-versatile")
LLM_TEMPERATURE = 0.8

# Overlap targets (minutes)
PAIR_OVERLAP_TARGET = 60
GROUP_OVERLAP_TARGET = 90

# Matching settings
POD_PRUNE_K = 12  # Candidates kept (by seeker overlap) before pod enumeration
MAX_WORKERS = int(os.getenv("PODMATCH_MAX_WORKERS", "0")) or (os.cpu_count() or 1)
DEFAULT_LIMIT = 10
MINUTES_PER_DAY = 24 * 60

# Text limits
MAX_HIGHLIGHT_LENGTH = 140
MAX_DESCRIPTION_LENGTH = 800
MAX_SUGGESTION_SUMMARY_LENGTH = 180
MAX_HANGOUT_MINUTES = 240
DEFAULT_HANGOUT_MINUTES = 60
MAX_SUGGESTIONS = 4
