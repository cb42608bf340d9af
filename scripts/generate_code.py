#!/usr/bin/env python3
"""
ImageWatch Code Generation Script.

Renders a value as a QR code or Code 39 barcode PNG.
Requires Python 3.11+.

Usage:
    python scripts/generate_code.py HELLO --type Barcode39 --output code.png
"""

import argparse
import sys
from pathlib import Path

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))

from codes.generator import CodeGenerator, CodeType
from utils.errors import CodeGenerationError
from utils.logger import configure_logging


configure_logging()


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Render a value as a QR code or barcode PNG",
    )
    parser.add_argument(
        "value",
        help="Text to encode",
    )
    parser.add_argument(
        "--type",
        choices=[t.value for t in CodeType],
        default=CodeType.QR_CODE.value,
        help="Symbology to use",
    )
    parser.add_argument(
        "--output",
        default=None,
        help="Output path or URI (default: CODES_FILE_PATH)",
    )

    args = parser.parse_args()

    try:
        path = CodeGenerator().generate(args.value, args.type, file_path=args.output)
    except CodeGenerationError as e:
        print(f"Error: {e}")
        sys.exit(1)

    print(f"Written: {path}")


if __name__ == "__main__":
    main()
