"""Converting plain-text identification keys into Darwin Core taxa."""
