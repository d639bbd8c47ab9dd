"""
DirectDigital Models
Pydantic models for client configuration, request options and parsed responses
"""

from typing import Optional, Dict, Any, List, Union
from pydantic import BaseModel, ConfigDict, Field, field_validator

from models.types import ApiVersion


class ClientConfig(BaseModel):
    """Immutable client configuration"""
    model_config = ConfigDict(frozen=True)

    host: str
    api_version: Union[str, int, float] = 'v1'
    trusted_partner_id: str = ''
    timeout: float = 30

    @field_validator('api_version')
    @classmethod
    def _check_version(cls, value):
        # Fail at construction rather than on the first gated call
        ApiVersion(value)
        return value

    @property
    def version(self) -> ApiVersion:
        return ApiVersion(self.api_version)


class UserInfo(BaseModel):
    """Customer details, passed through verbatim as request parameters"""
    model_config = ConfigDict(populate_by_name=True, extra='forbid')

    first_name: Optional[str] = Field(default=None, alias='firstName')
    last_name: Optional[str] = Field(default=None, alias='lastName')
    email: Optional[str] = None
    username: Optional[str] = None

    def as_userinfovo(self) -> Dict[str, Optional[str]]:
        """
        Parameters in the 'userinfovo.' form used by fulfillment and redeem endpoints

        Returns:
            dict: userinfovo.email, userinfovo.firstname, userinfovo.lastname, userinfovo.username
        """
        return {
            'userinfovo.email': self.email,
            'userinfovo.firstname': self.first_name,
            'userinfovo.lastname': self.last_name,
            'userinfovo.username': self.username,
        }

    def as_embed_params(self) -> Dict[str, Optional[str]]:
        """Flat parameter form used by the embed code endpoints"""
        return {
            'email': self.email,
            'firstname': self.first_name,
            'lastname': self.last_name,
            'username': self.username,
        }


class EmbedCodeOptions(BaseModel):
    """Options recognised by retrieveEmbedCode on the V2 API"""
    remote: bool = False
    empty_mode: bool = False
    width: str = '100%'
    height: str = '100%'

    def as_params(self) -> Dict[str, Any]:
        return {
            'remote': self.remote,
            'emptyMode': self.empty_mode,
            'width': self.width,
            'height': self.height,
        }


class UserProductsResponse(BaseModel):
    """retrieveUserProducts API response"""
    model_config = ConfigDict(extra='allow')

    active: List[Any] = []
    inactive: List[Any] = []

    @field_validator('active', 'inactive', mode='before')
    @classmethod
    def _null_as_empty(cls, value):
        return [] if value is None else value

    def count(self, do_count_active: bool = False, do_count_inactive: bool = False) -> int:
        """
        Count products in the selected lists

        Args:
            do_count_active: Include active products
            do_count_inactive: Include inactive products

        Returns:
            int: Number of products counted
        """
        total = 0
        if do_count_active:
            total += len(self.active)
        if do_count_inactive:
            total += len(self.inactive)
        return total

    def has_active(self, product_code: str) -> bool:
        """Exact, case-sensitive membership in the active list"""
        return any(code == product_code for code in self.active)


class Subsystems(BaseModel):
    """Per-subsystem availability"""
    web: bool


class ServiceStatus(BaseModel):
    """Result of a status check"""
    online: bool
    subsystems: Subsystems
    latency: str

    @classmethod
    def from_web_status(cls, web_status: bool, latency_ms: float) -> 'ServiceStatus':
        return cls(
            online=web_status,
            subsystems=Subsystems(web=web_status),
            latency=f"{latency_ms}ms"
        )
