"""HTTP response models for the Sveriges Radio MCP Server."""

from datetime import datetime

from pydantic import BaseModel, Field


class SessionCounts(BaseModel):
    total: int = Field(default=0, ge=0, description="Live streamable HTTP sessions")
    pending: int = Field(default=0, ge=0, description="Sessions awaiting handshake")
    active: int = Field(default=0, ge=0, description="Sessions past handshake")
    legacy: int = Field(default=0, ge=0, description="Open legacy SSE connections")


class CacheStats(BaseModel):
    total: int = Field(default=0, ge=0, description="Cached upstream responses")
    valid: int = Field(default=0, ge=0, description="Entries still fresh")
    expired: int = Field(default=0, ge=0, description="Entries past expiry (kept for fallback)")


class HealthResponse(BaseModel):
    """Response of GET /health."""

    status: str = Field(default="healthy", description="Service status")
    service: str = Field(..., description="Service name")
    version: str = Field(..., description="Server version")
    timestamp: datetime = Field(..., description="Time of the check (UTC)")
    tools: int = Field(..., ge=0, description="Number of registered tools")
    resources: int = Field(..., ge=0, description="Number of static resources")
    prompts: int = Field(..., ge=0, description="Number of prompt templates")
    auth_required: bool = Field(..., serialization_alias="authRequired")
    sessions: SessionCounts
    cache: CacheStats
