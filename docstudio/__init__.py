"""Legal document generation studio: templates, rendering and export."""

__version__ = "0.1.0"
