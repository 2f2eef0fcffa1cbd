"""twinpane - mutation and navigation core for a dual-pane file manager."""

__version__ = "0.1.0"
