"""Human-readable renderers (display only)."""
