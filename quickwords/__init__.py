"""Related-word generation service driven by a chat language model."""

__version__ = "0.1.0"
