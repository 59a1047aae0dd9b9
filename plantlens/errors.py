class PlantLensError(Exception):
    """Base class for PlantLens errors."""


class ServiceError(PlantLensError):
    """The Gemini API could not be reached or returned an unusable response."""


class ImageError(PlantLensError):
    """The uploaded data is not a readable image."""


class ClassificationError(PlantLensError):
    """The plant in the image could not be identified."""


class ConversationError(PlantLensError):
    """A chat reply could not be obtained."""
