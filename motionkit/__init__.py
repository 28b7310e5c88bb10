"""Path planning, path tracking and perception algorithms for vehicles and mobile robots."""

__version__ = "0.1.0"