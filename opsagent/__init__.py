"""Terminal assistant that keeps a plain-text fact memory and acts on it through a local LLM."""

__version__ = "0.1.0"