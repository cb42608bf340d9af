"""
ImageWatch Codes Package.

QR code and barcode image generation.
Requires Python 3.11+.
"""

from codes.generator import CodeGenerator, CodeType

__all__ = ["CodeGenerator", "CodeType"]
