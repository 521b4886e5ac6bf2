# ============================================================================
# MATCH RULES
# ============================================================================
MIN_MATCH_SIZE = 3
POINTS_PER_BLOCK = 10

# Combo multiplier grows while matches land less than COMBO_WINDOW seconds apart.
COMBO_WINDOW = 1.0
COMBO_STEP = 0.5
COMBO_MAX = 3.0

# ============================================================================
# PLAYABILITY
# ============================================================================
SHUFFLE_MAX_ATTEMPTS = 5
SHUFFLE_RECOLOR_CHANCE = 0.3
REGENERATE_MAX_ATTEMPTS = 200

# ============================================================================
# DEFERRED ACTION DELAYS (seconds)
# ============================================================================
MATCH_CHECK_DELAY = 0.1       # after a selection, before checking for a match
GRID_UPDATE_DELAY = 0.3       # after a match, before gravity is applied
SETTLE_DELAY = 0.5            # after gravity, before checking for remaining moves
AUTO_SHUFFLE_DELAY = 1.5      # after announcing "no moves", before reshuffling
END_GAME_DELAY = 0.2          # after the timer hits zero, before ending the game
START_MESSAGE_DURATION = 1.5
MESSAGE_DURATION = 2.0

# Repeated presses on the same cell inside this window are dropped.
CLICK_THROTTLE_INTERVAL = 0.3

# ============================================================================
# PROGRESS
# ============================================================================
RECENT_SCORES_LIMIT = 10
SYNC_INTERVAL = 30.0

# ============================================================================
# WINDOW & LAYOUT
# ============================================================================
WINDOW_WIDTH = 800
WINDOW_HEIGHT = 600
WINDOW_TITLE = "Block Blast"
HUD_HEIGHT = 80
BOTTOM_MARGIN = 20
BOARD_MAX_WIDTH_PCT = 0.75
BOARD_MAX_HEIGHT_PCT = 0.90
MIN_TILE_SIZE = 20

# One RGB entry per color index; levels never use more than eight colors.
PALETTE = [
    (231, 76, 60),    # red
    (46, 204, 113),   # green
    (52, 152, 219),   # blue
    (241, 196, 15),   # yellow
    (155, 89, 182),   # purple
    (26, 188, 156),   # teal
    (230, 126, 34),   # orange
    (236, 112, 170),  # pink
]
