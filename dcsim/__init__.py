"""Double crystal X-ray spectrometer simulation: geometry, splines, Voigt shapes, fitting and scans."""

__version__ = "0.1.0"

__all__ = [
    "settings",
    "geometry",
    "spline",
    "voigt",
    "levmar",
    "simple_source",
    "complex_geometry",
]