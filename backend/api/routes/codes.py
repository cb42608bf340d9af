"""
ImageWatch Code Routes.

QR code and barcode generation endpoints.
Requires Python 3.11+.
"""

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from api.dependencies import get_code_generator
from codes.generator import CodeGenerator, CodeType
from utils.errors import CodeGenerationError
from utils.logger import get_logger

router = APIRouter()
logger = get_logger("api.codes")


class CodeRequest(BaseModel):
    """Request body for code generation."""

    value: str = Field(..., min_length=1, max_length=2048)
    type: CodeType = CodeType.QR_CODE


class CodeResponse(BaseModel):
    """Response model for code generation."""

    path: str
    type: CodeType
    size: int


@router.post("", response_model=CodeResponse)
def generate_code(
    request: CodeRequest,
    generator: CodeGenerator = Depends(get_code_generator),
) -> CodeResponse:
    """Render the value and write it to the configured file path."""
    logger.debug("code_requested", code_type=request.type.value, length=len(request.value))

    try:
        path = generator.generate(request.value, request.type)
    except CodeGenerationError as e:
        raise HTTPException(status_code=422, detail=str(e))

    return CodeResponse(path=str(path), type=request.type, size=path.stat().st_size)
