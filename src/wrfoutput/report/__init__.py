"""Output renderers for extracted records."""
