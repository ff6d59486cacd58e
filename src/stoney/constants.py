"""
constants.py: Centralized configuration for the simulation, spawning and leaderboard.
"""

# -------- Time Config --------
NOMINAL_STEP = 1.0 / 60.0        # Step every tuned constant below assumes (seconds)
STEP = 1.0 / 60.0                # Fixed simulation step (seconds)
MAX_FRAME = 0.05                 # Longest wall-clock frame fed to the accumulator
RENDER_FPS = 60

# -------- World Config (logical units) --------
WORLD_WIDTH = 288
WORLD_HEIGHT = 512
PLAY_AREA_RATIO = 0.79           # Ground band starts at WORLD_HEIGHT * ratio

# -------- Player Config --------
PLAYER_X_RATIO = 0.2
PLAYER_Y_RATIO = 0.45
PLAYER_W_FALLBACK = 34           # Used until the sprite is loaded
PLAYER_H_FALLBACK = 24
HITBOX_PADDING = 4.0             # Shrink per side

# -------- Physics Config (units per nominal step) --------
GRAVITY = 0.38
FLAP_IMPULSE = -6.0
TERMINAL_VELOCITY = 10.0

TILT_UP = 25.0                   # Degrees at FLAP_IMPULSE
TILT_DOWN = -90.0                # Degrees at TERMINAL_VELOCITY
TILT_RATE = 0.2                  # Exponential easing rate per nominal step

IDLE_BOB_AMPLITUDE = 4.0
IDLE_BOB_FREQUENCY = 1.0         # Hz

# -------- Pipe Config --------
PIPE_W_FALLBACK = 52
PIPE_H_FALLBACK = 320
PIPE_SPEED = -1.8
PIPE_SPAWN_MARGIN = 10           # Spawn at WORLD_WIDTH + margin
PIPE_EVICT_MARGIN = 5            # Evict once x + w < -margin
PIPE_SPACING_FACTOR = 2.6        # Min distance from right edge, in pipe widths
PIPE_OFFSET_TOP = 40             # Upper pipe y >= -pipe_h + top
PIPE_OFFSET_BOTTOM = -60         # Upper pipe y <= bottom
PIPE_GAP_RANGE = (140.0, 200.0)
PIPE_SPAWN_STEPS = (100.0, 150.0)
PIPE_SMOOTHING = 0.65

# -------- Ground Config --------
GROUND_SPEED = 1.3
GROUND_W_FALLBACK = WORLD_WIDTH + 48

# -------- Session Config --------
GAME_OVER_HOLD_STEPS = 45.0      # 0 resolves GameOver -> Idle in the same step

# -------- Leaderboard Config --------
LEADERBOARD_PORT = 50007
BUFFER_SIZE = 65536
LEADERBOARD_TIMEOUT = 2.0        # seconds
LEADERBOARD_LIMIT = 20
LEADERBOARD_MAX_LIMIT = 100
MAX_SCORE = 2 ** 63 - 1           # Largest value an SQLite INTEGER holds
DB_FILE = "stoney_scores.db"
BOT_TOKEN_ENV = "STONEY_BOT_TOKEN"
