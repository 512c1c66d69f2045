"""Project-wide defaults for the Lorenz viewer."""

LORENZ_SIGMA = 10.0  # Prandtl number
LORENZ_RHO = 28.0    # Rayleigh number
LORENZ_BETA = 8.0 / 3.0

DEFAULT_DT = 0.005
DEFAULT_INITIAL_STATE = (0.1, 0.0, 0.0)

DEFAULT_CAPACITY = 5000
DEFAULT_DISPLAY_SCALE = 0.3
DEFAULT_LOG_EVERY = 100

AXIS_EXTENT = 10
TICK_SIZE = 0.2
TICK_LABEL_SIZE = 0.3
AXIS_LABEL_SIZE = 0.4
AXIS_LABEL_OFFSET = 0.5
ARROW_RADIUS = 0.2
ARROW_HEIGHT = 0.5

AXIS_COLORS = {
    "x": "#ff0000",
    "y": "#00ff00",
    "z": "#0000ff",
}

DEFAULT_FPS = 60
DEFAULT_ROTATION_SPEED = 0.002  # radians per frame
DEFAULT_BACKGROUND = "#000000"
DEFAULT_LINE_COLOR = "#ffffff"
DEFAULT_LINE_WIDTH = 2.0
CAMERA_POSITION = (15.0, 15.0, 15.0)
