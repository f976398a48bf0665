"""globcat: concatenate files selected by glob patterns into one annotated document."""
