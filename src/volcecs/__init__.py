"""
volcecs - VolcEngine ECS workflow node with HMAC-SHA256 request signing
"""

__version__ = "1.0.0"

from .client import VolcEngineClient
from .credentials import (
    CredentialStore,
    StaticCredentialStore,
    EnvironmentCredentialStore,
)
from .ecs import (
    EcsNode,
    NODE_DESCRIPTION,
    copy_image,
    describe_tasks,
    detect_image,
    parse_and_validate_ids,
)
from .models import (
    Credentials,
    Region,
    Service,
    ErrorCode,
    TaskInfo,
    CopyImageResult,
    DescribeTasksResult,
    DetectImageResult,
    ItemResult,
)
from .error import (
    VolcEngineException,
    ValidationException,
    CredentialsException,
    TransportException,
    ResponseParseException,
    ApiException,
    ServerException,
)

__all__ = [
    "VolcEngineClient",
    "CredentialStore",
    "StaticCredentialStore",
    "EnvironmentCredentialStore",
    "EcsNode",
    "NODE_DESCRIPTION",
    "copy_image",
    "describe_tasks",
    "detect_image",
    "parse_and_validate_ids",
    "Credentials",
    "Region",
    "Service",
    "ErrorCode",
    "TaskInfo",
    "CopyImageResult",
    "DescribeTasksResult",
    "DetectImageResult",
    "ItemResult",
    "VolcEngineException",
    "ValidationException",
    "CredentialsException",
    "TransportException",
    "ResponseParseException",
    "ApiException",
    "ServerException",
]
