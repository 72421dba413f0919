class MemeError(Exception):
    """Base error for the meme pipeline."""

class DecodeError(MemeError):
    """Image bytes could not be decoded or the bitmap has no pixels."""

class ExtractionError(MemeError):
    """Pixel sampling or color analysis failed. Never fatal to a run."""

class RenderError(MemeError):
    """No drawable surface. Fatal to the run."""
