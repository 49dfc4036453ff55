"""Create SharePoint list items, ensuring their target folder exists."""

__version__ = "0.1.0"
