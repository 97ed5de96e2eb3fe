# config.py
"""
Configuration constants for the photo-strip collage core
"""

# Format defaults
DEFAULT_FORMAT = "2x1"

# Compositing
BACKGROUND_COLOR = (0, 0, 0, 255)
RESAMPLING = "LANCZOS"       # Name of a PIL.Image.Resampling member

# Filters
DEFAULT_FILTER = "none"
PREVIEW_MAX_WORKERS = 4

# Watermark
WATERMARK_TEXT = "GRIMZ"
WATERMARK_MARGIN_RATIO = 0.03      # of min(width, height)
WATERMARK_FONT_RATIO = 0.06        # of output width
WATERMARK_MIN_FONT_SIZE = 20
WATERMARK_PAD_X_RATIO = 0.5        # of font size
WATERMARK_PAD_Y_RATIO = 0.35       # of font size
WATERMARK_MAX_RADIUS = 16
WATERMARK_BOX_ALPHA = 0.65
WATERMARK_GRADIENT = ("#22c55e", "#3b82f6", "#a855f7")
WATERMARK_SHADOW_COLOR = (0, 0, 0, 89)  # rgba(0,0,0,0.35)
WATERMARK_SHADOW_BLUR_RATIO = 0.25      # of font size
WATERMARK_FONT_FILES = ("DejaVuSans-Bold.ttf", "Arial Bold.ttf", "arialbd.ttf")

# Export
EXPORT_FORMAT = "PNG"
EXPORT_QUALITY = 92
EXPORT_FILENAME = "GRIMZ.png"
EXPORT_EXTENSIONS = {".png", ".jpg", ".jpeg", ".webp"}
FRAME_EXTENSIONS = {".png", ".jpg", ".jpeg", ".webp", ".bmp", ".tiff"}

# Logging
LOGGER_NAME = "stripcollage"
LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"
LOG_MAX_BYTES = 1_048_576
LOG_BACKUP_COUNT = 5
