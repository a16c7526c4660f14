"""
Hard-coded colours, geometry & fonts so every module can import them
without circular dependencies.
"""
from pathlib import Path
import pygame

# -------- colours --------
GREEN, DIM, BLACK, RED = (0, 255, 136), (0, 110, 60), (10, 14, 26), (255, 59, 92)
WHITE, GRID, AMBER     = (255, 255, 255), (0, 34, 24), (255, 170, 0)

# -------- sweep geometry --------
RANGE_FRACTIONS = (0.25, 0.5, 0.75, 1.0)
ANGLE_MARKS     = (0, 30, 60, 90, 120, 150, 180)
GRID_STEP       = 20                    # px between grid lines
LABEL_MARGIN    = 40                    # px kept free around the half-disc
BEAM_WIDTH_DEG  = 12                    # wedge trailing the sweep line
GLOW_RADIUS, DOT_RADIUS = 10, 3
ORIGIN_GLOW, ORIGIN_DOT = 15, 5

# -------- defaults --------
MAX_ANGLE     = 180
MAX_RANGE_CM  = 400
FADE_TIME_MS  = 3000

# -------- layout --------
pygame.font.init()
FONT       = pygame.font.SysFont("monospace", 18)
SMALL_FONT = pygame.font.SysFont("monospace", 12)
BIG_FONT   = pygame.font.SysFont("monospace", 32)

TITLE        = "SWEEPSCOPE"
HEADER_GAP   = 10
TOP_PAD_N    = BIG_FONT.get_height() + HEADER_GAP * 2
BOTTOM_PAD_N = FONT.get_height() * 2 + HEADER_GAP * 3

# -------- dirs --------
ROOT      = Path(__file__).resolve().parent.parent
CFG_PATH  = ROOT / "sweepscope_config.json"
