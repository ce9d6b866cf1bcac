"""
Configuration settings for the Anki package builder.
"""

import os
from pathlib import Path


class Config:
    """Configuration class for application settings."""
    
    # Output location; unset means packages land next to their deck file
    _output_dir = os.environ.get("APKG_BUILDER_OUTPUT_DIR")
    OUTPUT_DIR = Path(_output_dir) if _output_dir else None
    
    # Requirement inference
    SENTINEL = "SeNtInEl"
    
    # Archive layout
    COLLECTION_ENTRY = "collection.anki2"
    MEDIA_ENTRY = "media"
    PACKAGE_EXTENSION = ".apkg"
    
    # Notes table encoding
    FIELD_SEPARATOR = "\x1f"
    
    # Field defaults
    DEFAULT_FONT = "Liberation Sans"
    DEFAULT_FONT_SIZE = 20
    
    # Note type defaults
    DEFAULT_CSS = ""
    DEFAULT_LATEX_PRE = (
        "\\documentclass[12pt]{article}\n"
        "\\special{papersize=3in,5in}\n"
        "\\usepackage[utf8]{inputenc}\n"
        "\\usepackage{amssymb,amsmath}\n"
        "\\pagestyle{empty}\n"
        "\\setlength{\\parindent}{0in}\n"
        "\\begin{document}\n"
    )
    DEFAULT_LATEX_POST = "\\end{document}"
    
    @classmethod
    def ensure_directories(cls):
        """Create the output directory if one is configured."""
        if cls.OUTPUT_DIR is not None:
            cls.OUTPUT_DIR.mkdir(parents=True, exist_ok=True)
