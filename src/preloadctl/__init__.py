"""preloadctl: pre-import verification of interviewer and supervisor accounts."""

__version__ = "0.3.0"
