"""
ImageWatch Code Generator.

Renders values as QR codes or Code 39 barcodes into PNG files.
Requires Python 3.11+.
"""

import io
from enum import Enum
from pathlib import Path
from typing import BinaryIO

import qrcode
import qrcode.constants
from qrcode.exceptions import DataOverflowError
from barcode import Code39
from barcode.errors import BarcodeError
from barcode.writer import ImageWriter

from utils.config import CodeSettings, get_settings
from utils.errors import CodeGenerationError
from utils.logger import LoggerMixin
from watcher.resources import resolve_uri


class CodeType(str, Enum):
    """Supported symbologies."""

    QR_CODE = "QRCode"
    BARCODE_39 = "Barcode39"


_ERROR_CORRECTION = {
    "L": qrcode.constants.ERROR_CORRECT_L,
    "M": qrcode.constants.ERROR_CORRECT_M,
    "Q": qrcode.constants.ERROR_CORRECT_Q,
    "H": qrcode.constants.ERROR_CORRECT_H,
}


class CodeGenerator(LoggerMixin):
    """
    Writes QR codes and barcodes as PNG images.

    Encoding is left to the qrcode and python-barcode libraries; this class
    only picks the symbology, applies settings and writes the file.
    """

    def __init__(
        self,
        file_path: str | Path | None = None,
        settings: CodeSettings | None = None,
        project_dir: Path | None = None,
    ) -> None:
        """
        Initialize the generator.

        Args:
            file_path: Default output URI, overrides CODES_FILE_PATH
            settings: Code settings, defaults to the application settings
            project_dir: Root for project-relative URIs
        """
        app_settings = get_settings()
        self._settings = settings or app_settings.codes
        self._project_dir = Path(project_dir) if project_dir is not None else app_settings.project_dir
        self._file_path = str(file_path) if file_path is not None else self._settings.file_path

    @property
    def file_path(self) -> Path:
        """Resolved default output path."""
        return resolve_uri(self._file_path, self._project_dir)

    def generate(
        self,
        value: str,
        code_type: CodeType | str,
        file_path: str | Path | None = None,
    ) -> Path:
        """
        Render a value and write it as PNG.

        Args:
            value: Text to encode
            code_type: "QRCode" or "Barcode39"
            file_path: Output URI, defaults to the configured file path

        Returns:
            Path of the written file

        Raises:
            ValueError: If the code type is unknown
            CodeGenerationError: If the value cannot be encoded or written
        """
        code_type = CodeType(code_type)
        if not value:
            raise CodeGenerationError("Value to encode cannot be empty")

        target = (
            resolve_uri(str(file_path), self._project_dir)
            if file_path is not None
            else self.file_path
        )

        # Render fully before touching the file so a bad value leaves it intact
        buffer = io.BytesIO()
        self.render(value, code_type, buffer)

        try:
            target.write_bytes(buffer.getvalue())
        except OSError as e:
            self.log.error("code_write_failed", path=str(target), error=str(e))
            raise CodeGenerationError(f"Unable to write {target}: {e}") from e

        self.log.info("code_generated", path=str(target), code_type=code_type.value)
        return target

    def render(self, value: str, code_type: CodeType, stream: BinaryIO) -> None:
        """Render a value as PNG into an open binary stream."""
        if code_type is CodeType.QR_CODE:
            self._render_qr(value, stream)
        else:
            self._render_code39(value, stream)

    def _render_qr(self, value: str, stream: BinaryIO) -> None:
        qr = qrcode.QRCode(
            error_correction=_ERROR_CORRECTION[self._settings.error_correction],
            box_size=self._settings.box_size,
            border=self._settings.border,
        )
        try:
            qr.add_data(value)
            qr.make(fit=True)
        except (DataOverflowError, ValueError) as e:
            # Past version 40 qrcode reports an invalid version, not an overflow
            raise CodeGenerationError(f"Value too long for a QR code: {e}") from e
        img = qr.make_image(fill_color="black", back_color="white")
        img.save(stream)

    def encode_code39(self, value: str) -> Code39:
        """
        Build the Code 39 symbol for a value.

        Raises:
            CodeGenerationError: If the value holds characters Code 39 lacks
        """
        try:
            return Code39(
                value,
                writer=ImageWriter(),
                add_checksum=self._settings.code39_checksum,
            )
        # The checksum lookup runs before validation and fails with KeyError
        except (BarcodeError, KeyError) as e:
            raise CodeGenerationError(f"Cannot encode {value!r} as Code 39: {e}") from e

    def _render_code39(self, value: str, stream: BinaryIO) -> None:
        symbol = self.encode_code39(value)
        symbol.write(stream, {"write_text": self._settings.write_text})
