"""
Configuration & Path Management
===============================
This module serves as the central registry for file paths and global constants.

Why is this file needed?
------------------------
1. Abstraction: It keeps the brushing constants (slab thickness, glyph cap,
   color ranges) in one place instead of scattering magic numbers through the
   views.
2. Deployment: It handles the logic required by PyInstaller (sys._MEIPASS) to
   find assets (the sample dataset) when the app is frozen into an .exe.

Exports:
    ASSETS_PATH (str): Absolute path to the assets directory.
    DEFAULT_DATA_PATH (str): Absolute path to the bundled particle dataset.
"""
import logging
import sys
import os
from pathlib import Path

logger = logging.getLogger(__name__)


def get_resource_path(relative_path: str) -> str:
    """
    Get absolute path to resource, works for dev and for PyInstaller.
    """
    if hasattr(sys, '_MEIPASS'):
        # PyInstaller temp folder
        base_path: str = getattr(sys, '_MEIPASS')
        return os.path.join(base_path, relative_path)

    # Development mode: resolve relative to this file
    # config.py is in src/fluidbrush/
    current_file_path: Path = Path(__file__)
    project_root: Path = current_file_path.parent.parent.parent
    return os.path.join(str(project_root), relative_path)


# Paths
ASSETS_PATH: str = get_resource_path("assets")
DEFAULT_DATA_PATH: str = os.path.join(ASSETS_PATH, "particledata_058.csv")

if not os.path.exists(ASSETS_PATH):
    logger.debug(f"Assets path not found at {ASSETS_PATH}")

# --- Brushing ---
# Half-width of the brushed slab around the brush coordinate
SLAB_THICKNESS: float = 0.5
# One arrow key press moves the brush by half a slab
BRUSH_STEP: float = SLAB_THICKNESS / 2.0
# Percent of the maximum concentration
DEFAULT_THRESHOLD: float = 8.0
THRESHOLD_MIN: float = 0.0
THRESHOLD_MAX: float = 100.0

# --- Colors ---
SATURATED_RANGE: tuple[str, str] = ("#c6dbef", "#084594")
DESATURATED_RANGE: tuple[str, str] = ("#d9d9d9", "#252525")
UNBRUSHED_OPACITY: float = 0.25
SYMLOG_CONSTANT: float = 1.0

# --- 3D view ---
RELATIVE_POINT_SIZE: float = 20.0
# Rendered point size in screen pixels
MIN_POINT_SIZE_PX: float = 1.5
MAX_POINT_SIZE_PX: float = 24.0
PLANE_COLOR: str = "#cccccc"
PLANE_OPACITY: float = 0.5
CAMERA_POSITION: tuple[float, float, float] = (2.0, 2.0, 12.0)
# ~60 FPS
RENDER_INTERVAL_MS: int = 16

# --- Cross-section view ---
MAX_GLYPHS: int = 2000
GLYPH_MARGIN: float = 10.0
MIN_GLYPH_RADIUS: float = 5.0
# Fraction of the local maximum used for the secondary density estimate
DENSITY_FRACTION: float = 0.32
CONCENTRATION_MARKER_SCALE: float = 0.1
VELOCITY_SCALE_FACTOR: float = 2.5
GLYPH_STROKE_WIDTH: float = 0.1

# --- Legend ---
LEGEND_INCREMENTS: int = 10
LEGEND_X_MARGIN: float = 50.0
LEGEND_Y_MARGIN: float = 20.0

# Guard for divisions by (near) zero
EPSILON: float = 1e-9
