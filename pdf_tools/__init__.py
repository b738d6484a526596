"""
PDF Tools Backend.

HTTP service converting and compressing office documents, PDFs and
images by delegating to LibreOffice, Ghostscript and ImageMagick.
"""

__version__ = "0.1.0"
