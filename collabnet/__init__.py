"""collabnet: artist collaboration network explorer."""

__version__ = "0.1.0"
