"""Field-level patch authorization for organization and person records."""

__version__ = "0.1.0"
