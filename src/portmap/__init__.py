"""Port-area stakeholder map: layer data model, file import, assistant client."""

__version__ = "0.1.0"
