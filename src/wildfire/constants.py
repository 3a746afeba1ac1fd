"""Module-wide constants and defaults for the wildfire simulation."""

# Namespace under which every persisted flag is stored
MODULE_NAMESPACE = "wildfire"

# Flag keys inside the namespace
HAZARD_FLAG = "hazard"
FLAMMABLE_FLAG = "flammable"
CHANCE_FLAG = "chance"

# Grid defaults (pixels per grid space)
DEFAULT_CELL_SIZE = 100

# Default spread chance, a fire spreads on a 5 or 6
DEFAULT_CHANCE_FORMULA = "1d6"
DEFAULT_CHANCE_TARGET = 5

# Appearance of a freshly created fire token
FIRE_TOKEN_NAME = "Fire"
FIRE_TOKEN_IMG = "icons/svg/fire.svg"
