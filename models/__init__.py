"""
Models package
Pydantic models and internal types for the DirectDigital client
"""

from models.direct_digital import (
    ClientConfig,
    UserInfo,
    EmbedCodeOptions,
    UserProductsResponse,
    ServiceStatus,
    Subsystems,
)
from models.types import (
    Namespace,
    HttpMethod,
    RequestDescriptor,
    ApiVersion,
    VERSION_GATES,
    is_supported,
)

__all__ = [
    'ClientConfig',
    'UserInfo',
    'EmbedCodeOptions',
    'UserProductsResponse',
    'ServiceStatus',
    'Subsystems',
    'Namespace',
    'HttpMethod',
    'RequestDescriptor',
    'ApiVersion',
    'VERSION_GATES',
    'is_supported',
]
