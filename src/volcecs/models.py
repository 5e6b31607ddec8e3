"""
Data models for the VolcEngine ECS node
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, List, Dict, Any

from .error import ResponseParseException


API_VERSION = "2020-04-01"
DEFAULT_ENDPOINT = "https://open.volcengineapi.com"


class Region(str, Enum):
    """VolcEngine regions accepted for routing and signing."""
    CN_BEIJING = "cn-beijing"
    CN_SHANGHAI = "cn-shanghai"
    CN_GUANGZHOU = "cn-guangzhou"
    CN_CHENGDU = "cn-chengdu"
    CN_HANGZHOU = "cn-hangzhou"
    CN_NANJING = "cn-nanjing"
    AP_SINGAPORE = "ap-singapore"
    AP_TOKYO = "ap-tokyo"
    US_EAST_1 = "us-east-1"
    US_WEST_2 = "us-west-2"


DEFAULT_REGION = Region.CN_BEIJING

REGION_OPTIONS = [
    {"name": "North China 2 (Beijing) - cn-beijing", "value": Region.CN_BEIJING.value},
    {"name": "East China 2 (Shanghai) - cn-shanghai", "value": Region.CN_SHANGHAI.value},
    {"name": "South China 1 (Guangzhou) - cn-guangzhou", "value": Region.CN_GUANGZHOU.value},
    {"name": "Southwest 1 (Chengdu) - cn-chengdu", "value": Region.CN_CHENGDU.value},
    {"name": "East China 1 (Hangzhou) - cn-hangzhou", "value": Region.CN_HANGZHOU.value},
    {"name": "East China 3 (Nanjing) - cn-nanjing", "value": Region.CN_NANJING.value},
    {"name": "Asia Pacific Southeast 1 (Singapore) - ap-singapore", "value": Region.AP_SINGAPORE.value},
    {"name": "Asia Pacific Northeast 1 (Tokyo) - ap-tokyo", "value": Region.AP_TOKYO.value},
    {"name": "US East 1 (Virginia) - us-east-1", "value": Region.US_EAST_1.value},
    {"name": "US West 2 (Oregon) - us-west-2", "value": Region.US_WEST_2.value},
]


class Service(str, Enum):
    """Service names used in the credential scope."""
    ECS = "ecs"
    RDS = "rds"
    CDN = "cdn"
    VPC = "vpc"
    CLB = "clb"
    CFS = "cfs"


class ErrorCode(str, Enum):
    """Error codes reported by the ECS image APIs."""
    INVALID_ARGUMENT = "InvalidArgument"
    INVALID_DESCRIPTION_MALFORMED = "InvalidDescription.Malformed"
    INVALID_DESTINATION_REGION_MALFORMED = "InvalidDestinationRegion.Malformed"
    INVALID_IMAGE_FOR_COPY_IMAGE_UNSUPPORTED = "InvalidImageForCopyImage.UnSupported"
    INVALID_IMAGE_NAME_MALFORMED = "InvalidImageName.Malformed"
    INVALID_REGION_FOR_COPY_IMAGE_UNSUPPORTED = "InvalidRegionForCopyImage.UnSupported"
    LIMIT_EXCEEDED_MAXIMUM_IMAGE_COUNT = "LimitExceeded.MaximumImageCount"
    LIMIT_EXCEEDED_MAXIMUM_IMAGE_SIZE = "LimitExceeded.MaximumImageSize"
    MISSING_PARAMETER_DESTINATION_REGION = "MissingParameter.DestinationRegion"
    MISSING_PARAMETER_IMAGE_ID = "MissingParameter.ImageId"
    MISSING_PARAMETER_IMAGE_NAME = "MissingParameter.ImageName"
    INVALID_ACTION_OR_VERSION = "InvalidActionOrVersion"
    INVALID_IMAGE_NOT_FOUND = "InvalidImage.NotFound"
    INVALID_PROJECT_NOT_FOUND = "InvalidProject.NotFound"
    INVALID_DESTINATION_REGION_MISMATCH = "InvalidDestinationRegion.Mismatch"
    OPERATION_DENIED_RESOURCE_LOCKED = "OperationDenied.ResourceLocked"
    OPERATION_DENIED_SNAPSHOT_SERVICE_UNAVAILABLE = "OperationDenied.SnapshotServiceUnavailable"
    INTERNAL_ERROR = "InternalError"


@dataclass(frozen=True)
class Credentials:
    """Access key pair plus the region it signs for."""
    access_key_id: str
    secret_access_key: str
    region: str = DEFAULT_REGION.value

    def __repr__(self) -> str:
        return (
            f"Credentials(access_key_id={self.access_key_id!r}, "
            f"secret_access_key='***', region={self.region!r})"
        )


@dataclass(frozen=True)
class SignatureOptions:
    """Everything needed to sign a single request."""
    access_key_id: str
    secret_access_key: str
    region: str
    service: str
    method: str
    url: str
    headers: Dict[str, str]
    timestamp: str
    body: Optional[str] = None

    @property
    def date(self) -> str:
        return self.timestamp[:8]


@dataclass
class ApiErrorInfo:
    """Provider error carried in ResponseMetadata.Error."""
    code: str
    message: str


@dataclass
class ResponseMetadata:
    """Represents the ResponseMetadata block of every API response."""
    request_id: Optional[str] = None
    action: Optional[str] = None
    version: Optional[str] = None
    service: Optional[str] = None
    region: Optional[str] = None
    error: Optional[ApiErrorInfo] = None

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "ResponseMetadata":
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ResponseParseException(f"ResponseMetadata={data!r}")
        # An empty Error object still marks a failure.
        error = data.get("Error")
        if error is not None and not isinstance(error, dict):
            raise ResponseParseException(f"ResponseMetadata.Error={error!r}")
        return cls(
            request_id=data.get("RequestId"),
            action=data.get("Action"),
            version=data.get("Version"),
            service=data.get("Service"),
            region=data.get("Region"),
            error=ApiErrorInfo(
                code=error.get("Code", ""),
                message=error.get("Message", ""),
            ) if error is not None else None,
        )


@dataclass
class TaskInfo:
    """Represents an async task reported by DescribeTasks."""
    id: str
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    end_at: Optional[str] = None
    resource_id: Optional[str] = None
    type: Optional[str] = None
    progress: Optional[int] = None
    status: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TaskInfo":
        if not isinstance(data, dict):
            raise ResponseParseException(f"Task={data!r}")
        return cls(
            id=data.get("Id"),
            created_at=data.get("CreatedAt"),
            updated_at=data.get("UpdatedAt"),
            end_at=data.get("EndAt"),
            resource_id=data.get("ResourceId"),
            type=data.get("Type"),
            progress=data.get("Process"),
            status=data.get("Status"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
            "endAt": self.end_at,
            "resourceId": self.resource_id,
            "type": self.type,
            "progress": self.progress,
            "status": self.status,
        }


@dataclass
class CopyImageResult:
    """Represents the result of a CopyImage operation."""
    request_id: Optional[str]
    source_image_id: str
    target_image_id: Optional[str]
    target_region: str
    target_image_name: str
    success: bool = True

    @property
    def message(self) -> str:
        return f"Image copied successfully, target image ID: {self.target_image_id}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "requestId": self.request_id,
            "sourceImageId": self.source_image_id,
            "targetImageId": self.target_image_id,
            "targetRegion": self.target_region,
            "targetImageName": self.target_image_name,
            "message": self.message,
        }


@dataclass
class DescribeTasksResult:
    """Represents one page of DescribeTasks results."""
    request_id: Optional[str]
    next_token: Optional[str] = None
    tasks: List[TaskInfo] = field(default_factory=list)
    success: bool = True

    @property
    def has_more(self) -> bool:
        return bool(self.next_token)

    @property
    def total_tasks(self) -> int:
        return len(self.tasks)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "requestId": self.request_id,
            "nextToken": self.next_token,
            "tasks": [task.to_dict() for task in self.tasks],
            "totalTasks": self.total_tasks,
            "hasMore": self.has_more,
        }


@dataclass
class DetectImageResult:
    """Represents the result of a DetectImage operation."""
    request_id: Optional[str]
    image_id: str
    success: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "requestId": self.request_id,
            "imageId": self.image_id,
            "message": f"Image detection started for image ID: {self.image_id}",
        }


@dataclass
class ItemResult:
    """
    Outcome of processing one input record.

    Either a success carrying the output record in ``json``, or an error
    carrying the failure message in ``error``. ``paired_item`` is the index
    of the input record it belongs to.
    """
    json: Dict[str, Any]
    paired_item: int
    error: Optional[str] = None
    exception: Optional[Exception] = field(default=None, repr=False, compare=False)

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, json: Dict[str, Any], paired_item: int) -> "ItemResult":
        return cls(json=json, paired_item=paired_item)

    @classmethod
    def failure(cls, exception: Exception, paired_item: int) -> "ItemResult":
        error = str(exception)
        return cls(
            json={"success": False, "error": error, "requestId": None},
            paired_item=paired_item,
            error=error,
            exception=exception,
        )
