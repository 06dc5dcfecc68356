"""http-curl — run curl with an allow-listed set of options over HTTP."""

__version__ = "1.0.0"
