"""Geographic lead discovery over place search providers."""
