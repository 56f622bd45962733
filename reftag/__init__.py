"""Keep floating major-version refs (v1, v2, ...) and 'latest' in step with releases."""

__version__ = "0.1.0"
