"""Physical layout of a tape: segments, pages, joiner marks and outlines."""
