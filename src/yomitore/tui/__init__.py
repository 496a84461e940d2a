"""Terminal front end: key decoding, rendering and help content."""
