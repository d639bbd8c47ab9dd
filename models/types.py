"""
Internal Types
Enums, dataclasses and the API version ordinal used by the client
"""

import re
from enum import Enum
from typing import Optional, Dict, List, Any, Tuple, Union
from dataclasses import dataclass, field


# ==================== Client Enums ====================

class Namespace(Enum):
    """Service namespaces the partner endpoints are mounted under"""
    CORE_SERVICES = "/directdigital"
    PLATFORM_INTEGRATION = "/xplana-platform-integration"

    @property
    def path(self) -> str:
        return self.value


class HttpMethod(Enum):
    """HTTP methods issued by the client"""
    GET = "GET"
    POST = "POST"


# ==================== Dataclasses ====================

QueryValue = Union[str, int, float, bool, None, List[Any]]


@dataclass
class RequestDescriptor:
    """
    One outbound request, built per call and discarded afterwards

    The query mapping is copied by the client before trustedPartnerID is
    added, so the caller's own dict is never touched.
    """
    method: HttpMethod
    namespace: Namespace
    endpoint: str
    query: Dict[str, QueryValue] = field(default_factory=dict)
    form: Optional[Dict[str, Any]] = None


# ==================== API Version ====================

class ApiVersion:
    """
    Comparable API version identifier

    Accepts the named scheme ('v1', 'v2') as well as numeric versions
    (0.7, '0.8', '1.0.2'). Named versions are aliases on the numeric line
    so that every gate can be expressed as one minimum version.

    Example:
        >>> ApiVersion('v2') >= ApiVersion('0.6')
        True
        >>> ApiVersion(0.7) < ApiVersion('0.8')
        True
    """

    ALIASES = {
        'v1': '0.5',
        'v2': '0.6',
    }

    _NUMERIC = re.compile(r'^v?(\d+(?:\.\d+)*)$')

    def __init__(self, value: Union[str, int, float, 'ApiVersion']):
        if isinstance(value, ApiVersion):
            self.raw = value.raw
            self.parts = value.parts
            return

        if isinstance(value, bool) or value is None:
            raise ValueError(f"Invalid API version: {value!r}")

        self.raw = value
        text = str(value).strip().lower()
        text = self.ALIASES.get(text, text)

        match = self._NUMERIC.match(text)
        if not match:
            raise ValueError(f"Invalid API version: {value!r}")

        parts = [int(p) for p in match.group(1).split('.')]
        # 0.8 and 0.8.0 compare equal
        while len(parts) > 1 and parts[-1] == 0:
            parts.pop()
        self.parts: Tuple[int, ...] = tuple(parts)

    def _coerce(self, other) -> 'ApiVersion':
        return other if isinstance(other, ApiVersion) else ApiVersion(other)

    def __eq__(self, other):
        try:
            return self.parts == self._coerce(other).parts
        except ValueError:
            return NotImplemented

    def __lt__(self, other):
        return self.parts < self._coerce(other).parts

    def __le__(self, other):
        return self.parts <= self._coerce(other).parts

    def __gt__(self, other):
        return self.parts > self._coerce(other).parts

    def __ge__(self, other):
        return self.parts >= self._coerce(other).parts

    def __hash__(self):
        return hash(self.parts)

    def __str__(self):
        return str(self.raw)

    def __repr__(self):
        return f"ApiVersion({self.raw!r})"


# Minimum API version per gated operation
VERSION_GATES: Dict[str, ApiVersion] = {
    'retrieve_embed_code_v2': ApiVersion('0.6'),
    'redeem_code_from_bookstore': ApiVersion('0.6'),
    'redeem_code_from_bookstore_post': ApiVersion('0.8'),
    'retrieve_integrated_embed_code': ApiVersion('0.7'),
    'renew_product': ApiVersion('0.8'),
}


def is_supported(operation: str, version: Union[str, int, float, ApiVersion]) -> bool:
    """Check whether an operation is available at the given API version"""
    minimum = VERSION_GATES.get(operation)
    if minimum is None:
        return True
    return ApiVersion(version) >= minimum
