"""Ingredient label analyzer.

Turns noisy OCR text from a food label into a deduplicated, confidence-scored
ingredient list and classifies each ingredient as clean or concerning.
"""

__version__ = "0.1.0"
