"""
GAEB Converter Version Information
Single source of truth for application version across all components
"""

__version__ = "1.0.0"

APP_NAME = "GAEB Converter"
APP_FULL_NAME = "GAEB Converter - Produktionsliste"
APP_DESCRIPTION = "Convert GAEB bill-of-quantities files into production tracking workbooks"
