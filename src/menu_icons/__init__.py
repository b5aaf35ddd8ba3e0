"""Menu Icons: nav menu icon picker, settings store and form fields."""

__version__ = "0.3.0"
