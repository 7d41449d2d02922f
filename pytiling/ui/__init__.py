"""Rich renderables and the Textual dashboard."""
