"""Central configuration for runtime-tunable parameters.

All constants can be overridden via environment variables so that the
interactive game paces the computer's moves for a human by default, while the
automated test-suite can run them instantly.
"""

from __future__ import annotations

import os
from pathlib import Path


# ===========================================================================
# Computer Turn Pacing
# ===========================================================================
# SALVO_MOVE_DELAY: Delay (in seconds) before the computer fires in competitive mode.
#   Defaults to 1.0. A value of 0 applies the computer's shot immediately.
#   Example: export SALVO_MOVE_DELAY=0.25
COMPUTER_MOVE_DELAY: float = float(os.getenv("SALVO_MOVE_DELAY", "1.0"))


# ===========================================================================
# Fleet Generation
# ===========================================================================
# SALVO_PLACEMENT_ATTEMPTS: Random draws tried per ship unit before giving up.
#   Defaults to 1000.
#   Example: export SALVO_PLACEMENT_ATTEMPTS=5000
PLACEMENT_ATTEMPTS: int = int(os.getenv("SALVO_PLACEMENT_ATTEMPTS", "1000"))

# SALVO_FLEET_RETRIES: Whole-fleet regenerations attempted for the computer's
#   board when a single generation run leaves units unplaced.
#   Defaults to 5.
FLEET_RETRIES: int = int(os.getenv("SALVO_FLEET_RETRIES", "5"))


# ===========================================================================
# Player Defaults
# ===========================================================================
# SALVO_PLAYER: Default player name used for statistics.
DEFAULT_PLAYER: str = os.getenv("SALVO_PLAYER", "player")

# SALVO_DIFFICULTY: Default difficulty preset key (6x6, 9x9, 12x12, 15x15).
DEFAULT_DIFFICULTY: str = os.getenv("SALVO_DIFFICULTY", "9x9")


# ===========================================================================
# Files
# ===========================================================================
# SALVO_STATS_PATH: JSON file holding the per-player match history.
#   Defaults to ~/.salvo/stats.json
STATS_PATH: Path = Path(os.getenv("SALVO_STATS_PATH", str(Path.home() / ".salvo" / "stats.json")))

# Suggested suffix for exported board layouts.
FIELD_SUFFIX = ".fieldfile"

# Marker characters used by the layout file body.
FIELD_SHIP_MARK = "L"
FIELD_WATER_MARK = "M"


# ===========================================================================
# Debugging and Logging
# ===========================================================================
# SALVO_DEBUG: If "1", enables detailed debug logging across modules.
#   Defaults to "0" (disabled).
#   Example: export SALVO_DEBUG=1
DEBUG: bool = os.getenv("SALVO_DEBUG", "0") == "1"

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
