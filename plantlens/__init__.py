"""PlantLens: identify a plant from a photo and chat about its care."""

__version__ = "0.1.0"
