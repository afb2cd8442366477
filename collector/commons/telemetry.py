from typing import Any, Dict, Optional

from collector.commons.logger import logger


def track_api_telemetry(
    name: str,
    duration_ms: float,
    success: bool,
    status_code: Optional[int] = None,
    error_code: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    payload = {
        "name": name,
        "duration_ms": max(0, round(duration_ms)),
        "success": success,
        "status_code": status_code,
        "error_code": error_code,
        "metadata": metadata or {},
    }
    if success:
        logger.info(f"[telemetry:api] {payload}")
    else:
        logger.warning(f"[telemetry:api] {payload}")
    return payload


def capture_observed_error(
    error: BaseException, area: str, metadata: Optional[Dict[str, Any]] = None
) -> None:
    logger.bind(area=area).error(f"[telemetry:error] {area}: {error!r} {metadata or {}}")
