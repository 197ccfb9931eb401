"""Tests for domain error handler to verify structured JSON error responses."""
import json
from datetime import datetime

import pytest
from fastapi.responses import JSONResponse

from app.core.error_handlers import domain_error_handler, ERROR_STATUS_MAP
from app.core.exceptions import (
    BackendError,
    ConflictError,
    DomainError,
    ErrorKind,
    InternalError,
    InvalidPayloadError,
    NotFoundError,
    ValidationError,
)
from app.core.validation import FieldError


class MockRequest:
    """Mock FastAPI Request object for testing."""
    
    def __init__(self, request_id: str = "test-request-123"):
        self.state = type('State', (), {'request_id': request_id})()


class TestDomainErrorExceptions:
    """Test domain exception classes and their error codes."""
    
    def test_domain_error_base(self):
        """Test base DomainError class."""
        error = DomainError(
            code="TEST_001",
            message="Test error message",
            details={"key": "value"}
        )
        
        assert error.code == "TEST_001"
        assert error.kind is ErrorKind.INTERNAL
        assert str(error) == "Test error message"
    
    def test_not_found_error(self):
        """Test NotFoundError generates code and default message from the entity."""
        error = NotFoundError("profile")
        
        assert error.code == "NF_PROFILE_001"
        assert error.kind is ErrorKind.NOT_FOUND
        assert error.message == "profile not found"
        assert error.details == {}
    
    def test_validation_error(self):
        """Test ValidationError generates correct error code."""
        error = ValidationError("email", "Invalid email format")
        
        assert error.code == "VAL_EMAIL_001"
        assert error.message == "Validation failed for email: Invalid email format"
        assert error.details == {"field": "email"}
    
    def test_invalid_payload_error_lists_every_field(self):
        """Test InvalidPayloadError aggregates field errors."""
        error = InvalidPayloadError([
            FieldError("email", "email", "must be a valid email address"),
            FieldError("password", "required", "is required"),
        ])
        
        assert isinstance(error, ValidationError)
        assert error.code == "VAL_PAYLOAD_001"
        assert [e["field"] for e in error.details["errors"]] == ["email", "password"]
    
    def test_conflict_and_backend_defaults(self):
        """Test default codes of the remaining kinds."""
        assert ConflictError("Badge already held").code == "CF_001"
        assert BackendError("Directory unavailable").code == "BE_001"
        assert InternalError("Unexpected").code == "INT_001"


class TestErrorStatusMap:
    """Test ERROR_STATUS_MAP mapping."""
    
    @pytest.mark.parametrize("error_type,status_code", [
        (NotFoundError, 404),
        (ValidationError, 400),
        (InvalidPayloadError, 400),
        (ConflictError, 409),
        (BackendError, 502),
        (InternalError, 500),
    ])
    def test_status_codes(self, error_type, status_code):
        assert ERROR_STATUS_MAP[error_type] == status_code


class TestDomainErrorHandler:
    """Test domain_error_handler function."""
    
    @pytest.mark.asyncio
    async def test_not_found_error_response(self):
        """Test NotFoundError returns 404 with structured JSON."""
        error = NotFoundError("badge", "badge 'Warlok' not found", {"name": "Warlok"})
        request = MockRequest(request_id="req-123")
        
        response = await domain_error_handler(request, error)
        
        assert isinstance(response, JSONResponse)
        assert response.status_code == 404
        
        data = json.loads(response.body.decode())
        assert data["data"] is None
        assert data["errors"] == [{
            "code": "NF_BADGE_001",
            "kind": "not_found",
            "message": "badge 'Warlok' not found",
            "details": {"name": "Warlok"},
        }]
    
    @pytest.mark.asyncio
    async def test_backend_error_hides_cause(self):
        """Test BackendError returns 502 without leaking the underlying failure."""
        try:
            try:
                raise RuntimeError("connection reset by peer")
            except RuntimeError as cause:
                raise BackendError("failed to list user") from cause
        except BackendError as e:
            error = e
        
        response = await domain_error_handler(MockRequest(), error)
        
        assert response.status_code == 502
        assert "connection reset" not in response.body.decode()
    
    @pytest.mark.asyncio
    async def test_response_includes_metadata(self):
        """Test error response includes request_id and timestamp."""
        error = NotFoundError("test_entity")
        request = MockRequest(request_id="test-request-id-12345")
        
        response = await domain_error_handler(request, error)
        
        data = json.loads(response.body.decode())
        assert data["meta"]["request_id"] == "test-request-id-12345"
        
        # Verify timestamp is a valid ISO datetime string
        datetime.fromisoformat(data["meta"]["timestamp"].replace('Z', '+00:00'))
    
    @pytest.mark.asyncio
    async def test_unknown_domain_error_returns_500(self):
        """Test unknown DomainError subclass returns 500."""
        
        class CustomDomainError(DomainError):
            """Custom domain error not in status map."""
            pass
        
        error = CustomDomainError("CUSTOM_001", "Custom error message")
        
        response = await domain_error_handler(MockRequest(request_id="req-custom"), error)
        
        assert response.status_code == 500  # Default for unmapped errors
    
    @pytest.mark.asyncio
    async def test_error_with_none_request_id(self):
        """Test error response when request has no request_id."""
        error = ValidationError("field", "Invalid field")
        
        # Create a mock request without request_id in state
        request = type('Request', (), {
            'state': type('State', (), {})()
        })()
        
        response = await domain_error_handler(request, error)
        
        data = json.loads(response.body.decode())
        assert data["meta"]["request_id"] is None


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
