"""Module-level constants for the ENML note engine."""

import os
from pathlib import Path

# Configuration
CONFIG_PATH = Path(
    os.environ.get("ENML_NOTES_CONFIG", Path(__file__).parent.parent / "stores.yaml")
)

# Markup
XML_PROLOG = '<?xml version="1.0" encoding="UTF-8"?>'
ENML_DOCTYPE = '<!DOCTYPE en-note SYSTEM "http://xml.evernote.com/pub/enml2.dtd">'

# Resources
DEFAULT_MIME_TYPE = "application/octet-stream"

# Local store layout
NOTE_SUFFIX = ".enml"
LOCK_SUFFIX = ".lock"
RESOURCE_DIRNAME = ".resources"

# Limits
DEFAULT_SEARCH_LIMIT = 50
MAX_SEARCH_LIMIT = 500

# Logging
LOG_LEVEL = "INFO"
