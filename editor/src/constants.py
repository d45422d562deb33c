"""
Calendar Page Editor - Constants and Configuration

This module contains all constant values used throughout the application:
- Page geometry and view scaling limits
- Interaction thresholds (drag, nudge, resize)
- History capacity
- Default colors and layer geometry
- Template selection keywords
- Tabular import column aliases
"""

# ======================================================================
# PAGE GEOMETRY
# ======================================================================
# Logical page size in pixels. Every position, size and translate value in
# the model is expressed in this space.

PAGE_WIDTH = 1080
PAGE_HEIGHT = 1620

# ======================================================================
# VIEW TRANSFORM
# ======================================================================

AUTO_SCALE_MARGIN = 100     # Viewport padding subtracted before fitting
AUTO_SCALE_MAX = 0.55       # Never render the page larger than this when fitting
AUTO_SCALE_MIN = 0.05       # Floor for tiny viewports
AUTO_SCALE_INITIAL = 0.4    # Before the first resize event arrives

ZOOM_MIN = 0.5
ZOOM_MAX = 2.0
ZOOM_STEP = 0.1

# ======================================================================
# INTERACTION
# ======================================================================

DRAG_THRESHOLD_PX = 5           # Screen pixels before a press becomes a drag
NUDGE_STEP = 1                  # Arrow key movement (page pixels)
NUDGE_STEP_LARGE = 10           # Arrow key movement with Shift
RESIZE_TEXT_DIVISOR = 200.0     # scale = 1 + (dx + dy) / divisor
MIN_FONT_SIZE = 8.0             # Floor for text resize (pixels)
MIN_ELEMENT_SIZE = 10.0         # Floor for box resize (pixels)
RESIZE_HANDLE_HIT_RADIUS = 12   # Page pixels around the bottom-right corner
DEFAULT_FONT_SIZE = 16.0        # Assumed font size of text slots with no override
DEFAULT_ELEMENT_SIZE = 100.0    # Assumed box size of slots with unknown bounds

# ======================================================================
# HISTORY MANAGEMENT
# ======================================================================

# Fixed capacity, not exposed as a setting
MAX_HISTORY_ENTRIES = 50

# ======================================================================
# LAYERS
# ======================================================================

LAYER_ID_PREFIX = 'layer_'
CUSTOM_TEMPLATE_ID_PREFIX = 'custom_'

LAYER_DEFAULT_X = 100
LAYER_DEFAULT_Y = 100
LAYER_TEXT_SIZE = (300, 100)
LAYER_SHAPE_SIZE = (200, 200)
LAYER_TEXT_FONT_SIZE = 48.0
LAYER_DEFAULT_TEXT = 'New Text'

# ======================================================================
# COLORS
# ======================================================================

ACCENT_BLUE = '#3b82f6'
TRANSPARENT = 'transparent'
DEFAULT_TEXT_COLOR = '#000000'
DEFAULT_BACKGROUND_COLOR = '#FFFFFF'
DEFAULT_PRIMARY_COLOR = '#D13429'
SELECTION_OUTLINE_COLOR = '#2563eb'

# ======================================================================
# TEMPLATE SELECTION
# ======================================================================

# Quote phrasing that reads as a manifesto / call to action -> template B
MANIFESTO_KEYWORDS = ("让我们", "一起", "成为", "加入", "打造", "目标", "相信", "力量")

# Tag fragments (case-insensitive) for illustration / poster pages -> template D
ART_TAG_KEYWORDS = ("插画", "海报", "艺术", "绘画", "Illustration", "Art", "Poster", "Design")

# ======================================================================
# DATES
# ======================================================================

WEEKDAYS_CN = ('星期一', '星期二', '星期三', '星期四', '星期五', '星期六', '星期日')  # Monday first
DEFAULT_IMPORT_DATE = '2026-01-01'

# ======================================================================
# TABULAR IMPORT
# ======================================================================
# Column names are matched case-insensitively, first alias wins.

COLUMN_ALIASES = {
    'date':        ['date', '日期', 'day', 'gregorian'],
    'quote':       ['quote', 'content', 'text', '文案', '金句', 'quote_cn'],
    'author_name': ['author', 'author_name', 'name', '作者', '姓名', 'author_cn'],
    'author_bio':  ['bio', 'author_bio', 'description', '简介', 'bio_cn'],
    'avatar':      ['avatar', 'avatar_url', 'headshot', '头像', 'author_img'],
    'image':       ['image', 'image_url', 'main_image', '图片', 'center_image', 'pic'],
    'brand':       ['brand', 'brand_name', 'logo_text', '品牌', 'left_brand'],
    'lunar':       ['lunar', 'nongli', '农历', 'lunar_cn', 'lunar_date'],
    'holiday':     ['is_holiday', 'holiday', '节日'],
    'tags':        ['tags', 'tag', '标签'],
}

TABULAR_EXTENSIONS = ('.csv', '.xlsx', '.xls')

# ======================================================================
# EXPORT
# ======================================================================

PDF_PAGE_SIZE = (595, 842)      # A4 portrait in points
PDF_IMAGE_WIDTH = 561.33        # Page image width, centred horizontally
PDF_RESOLUTION = 144.0          # dpi of the embedded page images

# ======================================================================
# ASYNC COLLABORATORS
# ======================================================================

DEFAULT_COLLABORATOR_TIMEOUT_S = 60.0

# How long closing the window waits for each worker thread
COLLABORATOR_SHUTDOWN_WAIT_MS = 3000

# Shape requested from the image generator (width:height, portrait page)
DEFAULT_IMAGE_ASPECT_RATIO = '3:4'
