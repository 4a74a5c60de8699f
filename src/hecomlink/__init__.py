"""
hecomlink: Hecom business-object metadata as agent tools.

Caches the platform's object list and object descriptions, and reshapes
the exposed toolset when the agent focuses on a handful of objects.

Quick start::

    export HECOM_HOST=https://api.hecom.example HECOM_CLIENT_ID=... \\
           HECOM_CLIENT_SECRET=... HECOM_USERNAME=...
    python -m hecomlink          # starts on :8090

    httpx.get("http://localhost:8090/api/v1/tools?format=anthropic")
    httpx.post("http://localhost:8090/api/v1/tools/mark-objects", json={
        "objects": [{"name": "customer"}, {"label": "Contract"}],
    })
"""

__version__ = "0.1.0"

from hecomlink.config import HecomConfig, PlatformConfig, load_config
from hecomlink.core.cache import TTLCache
from hecomlink.core.types import FieldDescriptor, NamedItem, ObjectDetail, ObjectRef, ObjectSummary
from hecomlink.metadata.service import MetadataService
from hecomlink.orchestrator import HecomContext, Orchestrator
from hecomlink.platform.base import PlatformClient, PlatformError
from hecomlink.tools.capabilities import CapabilityRegistry, FocusState
from hecomlink.tools.registry import ToolDef, ToolRegistry

__all__ = [
    # Types
    "FieldDescriptor",
    "NamedItem",
    "ObjectDetail",
    "ObjectRef",
    "ObjectSummary",
    # Config
    "load_config",
    "HecomConfig",
    "PlatformConfig",
    # Core
    "TTLCache",
    "MetadataService",
    "CapabilityRegistry",
    "FocusState",
    "ToolDef",
    "ToolRegistry",
    "HecomContext",
    "Orchestrator",
    # Platform
    "PlatformClient",
    "PlatformError",
]
