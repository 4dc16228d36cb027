"""
Global Error Handling for the Chainup verifier
Structured exception handling with flat JSON error responses

Features:
- Custom exception classes
- Automatic error logging
- Structured JSON error responses
- Error tracking and aggregation
"""

import logging
import traceback
from datetime import datetime, timezone
from typing import Dict, Optional
from enum import Enum

from fastapi import Request, HTTPException
from fastapi.responses import JSONResponse

logger = logging.getLogger("ErrorHandler")


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


# ============================================
# ERROR CODES
# ============================================

class ErrorCode(str, Enum):
    # Client errors (4xx)
    BAD_REQUEST = "BAD_REQUEST"
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # Server errors (5xx)
    INTERNAL_ERROR = "INTERNAL_ERROR"
    FLATTEN_ERROR = "FLATTEN_ERROR"


# ============================================
# CUSTOM EXCEPTIONS
# ============================================

class ChainupError(Exception):
    """Base exception for the verifier"""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        status_code: int = 500,
        details: Optional[str] = None
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details

    def to_dict(self) -> Dict:
        body = {
            "success": False,
            "error": self.message,
            "code": self.code.value,
        }
        if self.details is not None:
            body["details"] = self.details
        body["timestamp"] = utc_timestamp()
        return body


class ValidationError(ChainupError):
    """Input validation error"""
    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message, ErrorCode.VALIDATION_ERROR, 400, details)


class RequestProcessingError(ChainupError):
    """Request could not be processed (malformed body, unexpected failure)"""
    def __init__(self, details: Optional[str] = None):
        super().__init__("Error processing request", ErrorCode.INTERNAL_ERROR, 500, details)


class FlattenError(ChainupError):
    """A flatten backend could not produce a single source unit"""
    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message, ErrorCode.FLATTEN_ERROR, 500, details)


# ============================================
# ERROR TRACKING
# ============================================

class ErrorTracker:
    """Tracks and aggregates errors for monitoring"""

    def __init__(self, max_errors: int = 500):
        self.errors: list = []
        self.max_errors = max_errors
        self.error_counts: Dict[str, int] = {}

    def track(self, error: Exception, request_path: str = None):
        """Track an error"""
        error_type = type(error).__name__

        self.error_counts[error_type] = self.error_counts.get(error_type, 0) + 1

        error_info = {
            "type": error_type,
            "message": str(error),
            "path": request_path,
            "timestamp": utc_timestamp(),
        }

        if isinstance(error, ChainupError):
            error_info["code"] = error.code.value

        self.errors.append(error_info)

        if len(self.errors) > self.max_errors:
            self.errors = self.errors[-self.max_errors:]

        if not isinstance(error, (ChainupError, HTTPException)) or getattr(error, "status_code", 500) >= 500:
            logger.error(f"Error tracked: {error_type} - {str(error)[:200]}")

    def get_stats(self) -> Dict:
        """Get error statistics"""
        return {
            "total_errors": len(self.errors),
            "error_counts": dict(self.error_counts),
            "recent_errors": self.errors[-10:],
            "timestamp": utc_timestamp()
        }

    def clear(self):
        """Clear error history"""
        self.errors.clear()
        self.error_counts.clear()


# Global error tracker
error_tracker = ErrorTracker()


# ============================================
# FASTAPI EXCEPTION HANDLERS
# ============================================

async def chainup_exception_handler(request: Request, exc: ChainupError) -> JSONResponse:
    """Handle ChainupError exceptions"""
    error_tracker.track(exc, str(request.url.path))

    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handle FastAPI HTTPExceptions"""
    error_tracker.track(exc, str(request.url.path))

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "error": exc.detail,
            "code": ErrorCode.BAD_REQUEST.value if exc.status_code < 500 else ErrorCode.INTERNAL_ERROR.value,
            "timestamp": utc_timestamp()
        }
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions"""
    error_tracker.track(exc, str(request.url.path))

    logger.error(f"Unhandled exception: {traceback.format_exc()}")

    return JSONResponse(
        status_code=500,
        content=RequestProcessingError(details=str(exc) or type(exc).__name__).to_dict()
    )


def register_exception_handlers(app):
    """Register all exception handlers with FastAPI app"""
    app.add_exception_handler(ChainupError, chainup_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    logger.info("Exception handlers registered")
