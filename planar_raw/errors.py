# planar_raw/errors.py
"""
Conversion error taxonomy.

Every error aborts the conversion of a single input file. Batch runs catch
ConversionError per file, report it and move on to the next file.
"""


class ConversionError(Exception):
    """Base class for all conversion failures."""


class InputError(ConversionError):
    """Bad header skip, bad search bounds, or an input path that is neither file nor folder."""


class FormatError(ConversionError):
    """Palette footer required but the payload is too short to hold it."""


class NoCandidateError(ConversionError):
    """No geometry in the search space consumes the planar data exactly."""


class GeometryMismatchError(ConversionError):
    """A geometry does not account for the planar byte count at decode time."""


__all__ = [
    "ConversionError",
    "InputError",
    "FormatError",
    "NoCandidateError",
    "GeometryMismatchError",
]
