"""Villa onboarding core: staged data collection with versioned auto-save."""

__version__ = "0.1.0"
