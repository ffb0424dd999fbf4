# Grid geometry (core coordinates: origin top-left, y grows downward)
CELL_SIZE = 50
MIN_CELL_SIZE = 12
MAX_GRID_DIMENSION = 99  # dimension inputs accept at most two digits

# Height of the control bar along the top of the window. Drops landing on it
# snap the tile back to where it was picked up.
CONTROL_BAR_HEIGHT = 60
GRID_TOP_MARGIN = 20

# Floating pool seeding
INITIAL_POOL_SIZE = 15
SEED_MARGIN = 100  # keep scattered tiles at least this far from the right/bottom edge
DEFAULT_VIEWPORT = (1024, 768)

ROTATIONS = (0, 90, 180, 270)
ROTATION_STEP = 90

# Pricing: flat per-tile surcharge applied when the alternate finish is selected.
ALTERNATE_FINISH_SURCHARGE = 2

# Input
DOUBLE_CLICK_INTERVAL = 0.35
MOUSE_BUTTON_LEFT = 1
MOUSE_BUTTON_RIGHT = 4
