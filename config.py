import math

# --- Canvas ---
WIDTH = 600
HEIGHT = 400
CENTER_X = WIDTH / 2
CENTER_Y = HEIGHT / 2
FPS = 60

# --- Geometry ---
NUCLEUS_RADIUS = 5
PARTICLE_RADIUS = 2
# Deflection happens once a particle is within 3 nucleus radii of the centre
CAPTURE_RADIUS_FACTOR = 3
CAPTURE_RADIUS = NUCLEUS_RADIUS * CAPTURE_RADIUS_FACTOR

# --- Emission ---
MAX_PARTICLES = 100
EMISSION_INTERVAL_MS = 100
ALPHA_SPEED = 1.5  # px per tick
# Spawn offset is +/- a quarter of the canvas height around the centreline
SPAWN_SPREAD = HEIGHT / 2
MAX_PATH_POINTS = 100

# === Scattering constants ===
# Simplified Rutherford formula, tuned for the screen rather than for nature:
#   scaleFactor = ENERGY_SCALE / E^2
#   tan(theta/2) = (k * Z * z_alpha) / (2 * E * |b| * scaleFactor)
COULOMB_K = 1.44      # MeV * fm / e^2
ALPHA_CHARGE = 2
ENERGY_SCALE = 5000.0
RANDOM_FACTOR_MIN = 0.9
RANDOM_FACTOR_MAX = 1.1
VELOCITY_JITTER = 0.1  # each component gets U(-0.1, 0.1) after deflection

# Parameter ranges exposed to the UI
NUCLEAR_CHARGE_MIN = 1
NUCLEAR_CHARGE_MAX = 92
NUCLEAR_CHARGE_DEFAULT = 79  # gold
ALPHA_ENERGY_MIN = 1.0
ALPHA_ENERGY_MAX = 10.0
ALPHA_ENERGY_DEFAULT = 5.0   # MeV

# --- Histogram ---
HISTOGRAM_BIN_WIDTH = 10
HISTOGRAM_BINS = 18  # 0..170 covers 0-180 degrees
HISTOGRAM_RECT = (WIDTH - 180 - 20, 20, 180, 100)  # x, y, w, h
HISTOGRAM_LABEL_EVERY = 3
THEORY_SAMPLES = 4000

# Colors (R, G, B[, A])
COLOR_BG = (240, 240, 240)
COLOR_FOIL = (255, 215, 0)
COLOR_NUCLEUS = (255, 0, 0)
COLOR_PARTICLE = (0, 0, 255)
COLOR_PATH = (0, 0, 255, 77)         # ~0.3 alpha
COLOR_TEXT = (0, 0, 0)
HISTOGRAM_BG_COLOR = (240, 240, 240, 179)  # ~0.7 alpha
HISTOGRAM_BAR_COLOR = (0, 0, 255, 153)     # ~0.6 alpha
HISTOGRAM_AXIS_COLOR = (0, 0, 0)
HISTOGRAM_THEORY_COLOR = (220, 120, 0)

FOIL_WIDTH = 2
NUCLEUS_OPACITY_Z = 100.0  # Z at which the nucleus is fully opaque

# --- Web shell ---
SERVER_PORT = 5000

DEG_PER_RAD = 180.0 / math.pi
