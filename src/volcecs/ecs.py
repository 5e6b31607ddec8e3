"""
ECS image operations and the batch node that drives them
"""

import logging
from typing import Any, Dict, Iterable, List, Mapping

from .client import VolcEngineClient
from .error import ResponseParseException, ValidationException, VolcEngineException
from .models import (
    REGION_OPTIONS,
    CopyImageResult,
    DescribeTasksResult,
    DetectImageResult,
    ItemResult,
    Region,
    Service,
    TaskInfo,
)


MAX_IDS = 100
DEFAULT_MAX_RESULTS = 20

logger = logging.getLogger(__name__)


NODE_DESCRIPTION: Dict[str, Any] = {
    "displayName": "VolcEngine ECS",
    "name": "volcEngineEcs",
    "description": "Interact with VolcEngine Elastic Compute Service (ECS)",
    "credentials": [{"name": "volcEngineApi", "required": True}],
    "properties": [
        {
            "name": "resource",
            "type": "options",
            "options": [{"name": "Image", "value": "image"}],
            "default": "image",
        },
        {
            "name": "operation",
            "type": "options",
            "displayOptions": {"show": {"resource": ["image"]}},
            "options": [
                {"name": "Copy", "value": "copy", "action": "Copy an image to another region"},
                {"name": "Describe Tasks", "value": "describeTasks", "action": "Query async task status"},
                {"name": "Detect Image", "value": "detectImage", "action": "Detect an image"},
            ],
            "default": "copy",
        },
        {"name": "imageId", "type": "string", "required": True, "default": "",
         "displayOptions": {"show": {"operation": ["copy", "detectImage"]}}},
        {"name": "destinationRegion", "type": "options", "required": True,
         "options": REGION_OPTIONS, "default": Region.CN_SHANGHAI.value,
         "displayOptions": {"show": {"operation": ["copy"]}}},
        {"name": "imageName", "type": "string", "required": True, "default": "",
         "displayOptions": {"show": {"operation": ["copy"]}}},
        {"name": "description", "type": "string", "default": "",
         "description": "Target image description, 0-255 characters",
         "displayOptions": {"show": {"operation": ["copy"]}}},
        {"name": "copyImageTags", "type": "boolean", "default": False,
         "displayOptions": {"show": {"operation": ["copy"]}}},
        {"name": "projectName", "type": "string", "default": "",
         "displayOptions": {"show": {"operation": ["copy"]}}},
        {"name": "queryType", "type": "options", "required": True, "default": "taskIds",
         "options": [
             {"name": "By Task IDs", "value": "taskIds"},
             {"name": "By Resource IDs", "value": "resourceIds"},
         ],
         "displayOptions": {"show": {"operation": ["describeTasks"]}}},
        {"name": "taskIds", "type": "string", "required": True, "default": "",
         "description": "Comma-separated task IDs, at most 100",
         "displayOptions": {"show": {"operation": ["describeTasks"], "queryType": ["taskIds"]}}},
        {"name": "resourceIds", "type": "string", "required": True, "default": "",
         "description": "Comma-separated resource IDs, at most 100",
         "displayOptions": {"show": {"operation": ["describeTasks"], "queryType": ["resourceIds"]}}},
        {"name": "maxResults", "type": "number", "default": DEFAULT_MAX_RESULTS,
         "typeOptions": {"minValue": 1, "maxValue": MAX_IDS},
         "displayOptions": {"show": {"operation": ["describeTasks"]}}},
        {"name": "nextToken", "type": "string", "default": "",
         "displayOptions": {"show": {"operation": ["describeTasks"]}}},
    ],
}


def parse_and_validate_ids(id_string: str, max_count: int, id_name: str) -> List[str]:
    """Split a comma-separated ID string into a non-empty, bounded list."""
    ids = [item.strip() for item in (id_string or "").split(",")]
    ids = [item for item in ids if item]
    if not ids:
        raise ValidationException(f"At least one {id_name} is required")
    if len(ids) > max_count:
        raise ValidationException(f"Maximum {max_count} {id_name}s are allowed")
    return ids


def _request_id(data: Mapping[str, Any]):
    return (data.get("ResponseMetadata") or {}).get("RequestId")


def _result(data: Mapping[str, Any]) -> Dict[str, Any]:
    result = data.get("Result")
    if result is None:
        return {}
    if not isinstance(result, dict):
        raise ResponseParseException(f"Result={result!r}")
    return result


def _tasks(result: Mapping[str, Any]) -> List[Any]:
    tasks = result.get("Tasks")
    if tasks is None:
        return []
    if not isinstance(tasks, list):
        raise ResponseParseException(f"Result.Tasks={tasks!r}")
    return tasks


def _max_results(value: Any) -> int:
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if isinstance(value, bool) or not isinstance(value, int) or not 1 <= value <= MAX_IDS:
        raise ValidationException(f"maxResults must be between 1 and {MAX_IDS}")
    return value


def _required(params: Mapping[str, Any], name: str) -> str:
    value = params.get(name)
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationException(f"Parameter '{name}' is required")
    return value


async def copy_image(client: VolcEngineClient, params: Mapping[str, Any]) -> CopyImageResult:
    """Copy an image to another region."""
    image_id = _required(params, "imageId")
    destination_region = _required(params, "destinationRegion")
    image_name = _required(params, "imageName")

    body: Dict[str, Any] = {
        "ImageId": image_id,
        "DestinationRegion": destination_region,
        "ImageName": image_name,
    }
    if params.get("description"):
        body["Description"] = params["description"]
    if params.get("copyImageTags"):
        body["CopyImageTags"] = True
    if params.get("projectName"):
        body["ProjectName"] = params["projectName"]

    data = await client.request("CopyImage", body, service=Service.ECS.value)
    result = _result(data)

    return CopyImageResult(
        request_id=_request_id(data),
        source_image_id=image_id,
        target_image_id=result.get("ImageId"),
        target_region=destination_region,
        target_image_name=image_name,
    )


async def describe_tasks(client: VolcEngineClient, params: Mapping[str, Any]) -> DescribeTasksResult:
    """Query async task status by task IDs or resource IDs."""
    query_type = params.get("queryType") or "taskIds"
    max_results = _max_results(params.get("maxResults", DEFAULT_MAX_RESULTS))
    next_token = params.get("nextToken") or ""

    body: Dict[str, Any] = {"MaxResults": max_results}
    if next_token:
        body["NextToken"] = next_token

    if query_type == "taskIds":
        body["TaskIds"] = parse_and_validate_ids(params.get("taskIds", ""), MAX_IDS, "task ID")
    elif query_type == "resourceIds":
        body["ResourceIds"] = parse_and_validate_ids(params.get("resourceIds", ""), MAX_IDS, "resource ID")
    else:
        raise ValidationException(f"Unsupported queryType '{query_type}'")

    data = await client.request("DescribeTasks", body, service=Service.ECS.value)
    result = _result(data)

    return DescribeTasksResult(
        request_id=_request_id(data),
        next_token=result.get("NextToken"),
        tasks=[TaskInfo.from_dict(task) for task in _tasks(result)],
    )


async def detect_image(client: VolcEngineClient, params: Mapping[str, Any]) -> DetectImageResult:
    """Start image detection for an image."""
    image_id = _required(params, "imageId")
    data = await client.request("DetectImage", {"ImageId": image_id}, service=Service.ECS.value)
    return DetectImageResult(
        request_id=_request_id(data),
        image_id=image_id,
    )


OPERATIONS = {
    ("image", "copy"): copy_image,
    ("image", "describeTasks"): describe_tasks,
    ("image", "detectImage"): detect_image,
}


class EcsNode:
    """
    Workflow node exposing the ECS image operations.

    Each input record names a ``resource`` and ``operation`` plus the
    operation's parameters. Records are processed one after another.
    With ``continue_on_fail`` a failing record yields an error result and
    the batch goes on; otherwise the first failure is raised.
    """

    description = NODE_DESCRIPTION

    def __init__(self, client: VolcEngineClient, continue_on_fail: bool = False):
        self.client = client
        self.continue_on_fail = continue_on_fail

    async def _process(self, params: Mapping[str, Any], index: int) -> ItemResult:
        resource = params.get("resource") or "image"
        operation = params.get("operation") or "copy"
        handler = OPERATIONS.get((resource, operation))

        try:
            if handler is None:
                raise ValidationException(
                    f"Unsupported operation '{operation}' for resource '{resource}'"
                )
            result = await handler(self.client, params)
        except VolcEngineException as ex:
            return ItemResult.failure(ex, index)

        return ItemResult.success(result.to_dict(), index)

    async def execute(self, items: Iterable[Mapping[str, Any]]) -> List[ItemResult]:
        results: List[ItemResult] = []
        for index, params in enumerate(items):
            item = await self._process(params, index)
            if not item.ok:
                if not self.continue_on_fail:
                    raise item.exception
                logger.warning(
                    "[VolcEngine][Node] item=%s failed: %s", index, item.error
                )
            results.append(item)
        return results
