"""
Default geometry and timing values for the calendar surface.

Views read overrides from Django settings (CALENDAR_*) and fall back to these.
"""

# month view rows
EVENT_HEIGHT = 24   # px per stacked event row
EVENT_GAP = 4       # px between rows

# week/day time grid
WEEK_CELLS_HEIGHT = 72  # px per hour cell
START_HOUR = 0
END_HOUR = 24

AGENDA_DAYS_TO_SHOW = 30

# provisional event created from a month cell / "new event"
DEFAULT_START_HOUR = 9
DEFAULT_END_HOUR = 10

# snapping buckets (minutes)
DRAG_SNAP_MINUTES = 15
CREATE_SNAP_MINUTES = 10
EDITOR_STEP_MINUTES = 10

# smallest visible slot for zero-length events: one editor step of a cell
MIN_EVENT_HEIGHT = WEEK_CELLS_HEIGHT * EDITOR_STEP_MINUTES / 60

# drag activation thresholds
POINTER_ACTIVATION_DISTANCE = 5  # px
TOUCH_ACTIVATION_DELAY_MS = 250
TOUCH_ACTIVATION_TOLERANCE = 5   # px

BASE_Z_INDEX = 10
CASCADE_WIDTH = 0.9
CASCADE_INDENT = 0.1
