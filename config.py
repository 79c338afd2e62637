"""
Configuration for Shot Tracker.
"""
from pathlib import Path

# ── GPU / Device ──────────────────────────────────────────────────────────────
# Only the YOLO ball detector cares about the device; the geometry and
# trajectory core is pure numpy.
def _resolve_device() -> str:
    try:
        import torch
        if torch.cuda.is_available():
            name = torch.cuda.get_device_name(0)
            print(f"[Config] GPU detected: {name} → using CUDA")
            return "cuda"
    except ImportError:
        pass
    return "cpu"

DEVICE = _resolve_device()

# ── Paths ─────────────────────────────────────────────────────────────────────
PROJECT_ROOT = Path(__file__).parent
RESULTS_DIR  = PROJECT_ROOT / "results"
STORAGE_DIR  = PROJECT_ROOT / "storage"

# ── Detection ─────────────────────────────────────────────────────────────────
BALL_MODEL           = "yolov8n.pt"   # swap for a basketball-specific checkpoint
BALL_CLASS_ID        = 32             # COCO "sports ball"
DETECTION_IMG_SIZE   = 640
DETECTION_CONF       = 0.5            # applied before NMS
NMS_IOU_THRESHOLD    = 0.45

# ── Linear algebra ────────────────────────────────────────────────────────────
PIVOT_EPSILON        = 1e-10          # smallest usable Gauss-Jordan pivot
DETERMINANT_EPSILON  = 1e-10          # |det| below this = singular
PROJECTION_EPSILON   = 1e-10          # homogeneous w below this = at infinity

# ── Court (NBA, feet) ─────────────────────────────────────────────────────────
# Court origin is assumed to sit under the basket.
COURT_WIDTH          = 94.0
COURT_HEIGHT         = 50.0
THREE_POINT_RADIUS   = 23.75
KEY_WIDTH            = 16.0
KEY_HEIGHT           = 19.0
MIN_CALIBRATION_POINTS = 4

# ── Trajectory classification ─────────────────────────────────────────────────
MIN_TRAJECTORY_POINTS  = 5
MAKE_THRESHOLD         = -0.5         # px/ms departure velocity at the rim
RIM_PROXIMITY_PX       = 50.0
MIN_LAUNCH_ANGLE_DEG   = 10.0
MAX_LAUNCH_ANGLE_DEG   = 80.0
MIN_VERTICAL_TRAVEL_PX = 20.0
NET_SLOWDOWN_RATIO     = 0.3          # final / overall vertical speed for a make
RIM_SLOWDOWN_RATIO     = 0.5          # departure / approach speed for a make
RANDOM_MAKE_CUTOFF     = 0.4          # placeholder fallback, random() > cutoff
THREE_POINT_PIXEL_DIST = 200.0        # uncalibrated three-point heuristic

# ── Session ───────────────────────────────────────────────────────────────────
SHOT_COOLDOWN_MS       = 2000
USE_CALIBRATION        = True
POINTS_TWO             = 2
POINTS_THREE           = 3

# ── Analytics ─────────────────────────────────────────────────────────────────
HEATMAP_GRID_SIZE      = 10.0         # court units per heatmap cell

# ── Storage ───────────────────────────────────────────────────────────────────
SHOTS_KEY              = "basketball-shots"
GAMES_LIST_KEY         = "basketball-games-list"
EXPORT_VERSION         = "1.0"

# ── Video output ──────────────────────────────────────────────────────────────
OUTPUT_CODEC    = "mp4v"
DEFAULT_SKIP    = 0
BOX_THICKNESS   = 2
FONT_SCALE      = 0.6
FONT_THICKNESS  = 1
TRAIL_LENGTH    = 30
