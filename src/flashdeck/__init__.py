"""flashdeck: adaptive flashcard review."""

VERSION = "0.1.0"
