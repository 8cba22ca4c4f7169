"""Client for the dashboard packaging service.

The packaging service takes the input dataset files plus a project name and
returns a deployable dashboard as a zip archive. The request is a multipart
form with the file fields `valueFile` (required) and `volumeFile`
(optional) and the form field `projectName`. A non-success response carries
a JSON body with optional `error` and `details` strings.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from market_kpi.config import Settings, get_settings
from market_kpi.models import Dataset, DataType

log = logging.getLogger(__name__)

VALUE_FIELD = "valueFile"
VOLUME_FIELD = "volumeFile"
PROJECT_FIELD = "projectName"
DEFAULT_ERROR = "Failed to generate dashboard"


class PackageExportError(RuntimeError):
    """Raised when a dashboard package cannot be generated or downloaded.

    Attributes:
        error: Short error string reported by the service, if any.
        details: Human-readable detail reported by the service, if any.
        status_code: HTTP status of the failed response, if one was received.
    """

    def __init__(
        self,
        message: str,
        *,
        error: str | None = None,
        details: str | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.error = error
        self.details = details
        self.status_code = status_code


@dataclass(frozen=True)
class UploadFile:
    """A file payload for one multipart field."""
    filename: str
    content: bytes
    content_type: str = "application/octet-stream"


def upload_from_path(path: Path) -> UploadFile:
    """Read a local file into an `UploadFile`."""
    content_type = "application/json" if path.suffix.lower() == ".json" else "application/octet-stream"
    return UploadFile(filename=path.name, content=path.read_bytes(), content_type=content_type)


def _matrix_upload(dataset: Dataset, data_type: DataType) -> UploadFile:
    payload = {
        "dimensions": dataset.dimensions.model_dump(mode="json"),
        "metadata": dataset.metadata.model_dump(mode="json"),
        "geography_segment_matrix": [
            r.model_dump(mode="json") for r in dataset.matrix(data_type)
        ],
    }
    return UploadFile(
        filename=f"{data_type}.json",
        content=json.dumps(payload).encode("utf-8"),
        content_type="application/json",
    )


def dataset_upload_files(dataset: Dataset) -> tuple[UploadFile, UploadFile | None]:
    """Serialize a dataset's value and volume matrices for upload.

    Returns:
        Tuple `(value_file, volume_file)`; the volume file is None when the
        dataset has no volume records.
    """
    value = _matrix_upload(dataset, "value")
    volume = _matrix_upload(dataset, "volume") if dataset.matrix("volume") else None
    return value, volume


def build_package_files(
    value: UploadFile | None,
    volume: UploadFile | None,
    project_name: str,
) -> tuple[dict[str, tuple[str, bytes, str]], dict[str, str]]:
    """Build the multipart `files` and `data` mappings for the request.

    Raises:
        PackageExportError: if the value file or the project name is missing.
    """
    if value is None:
        raise PackageExportError("A value file is required to generate a dashboard")
    name = project_name.strip()
    if not name:
        raise PackageExportError("A project name is required to generate a dashboard")

    files = {VALUE_FIELD: (value.filename, value.content, value.content_type)}
    if volume is not None:
        files[VOLUME_FIELD] = (volume.filename, volume.content, volume.content_type)
    return files, {PROJECT_FIELD: name}


def error_from_response(response: Any) -> PackageExportError:
    """Turn a failed response into a `PackageExportError`.

    The message is the body's `details`, else its `error`, else a generic
    message; a body that is not JSON is ignored.
    """
    try:
        body = response.json()
    except ValueError:
        body = {}
    if not isinstance(body, dict):
        body = {}

    error = body.get("error") or None
    details = body.get("details") or None
    return PackageExportError(
        str(details or error or DEFAULT_ERROR),
        error=error,
        details=details,
        status_code=response.status_code,
    )


def request_package(
    value: UploadFile | None,
    volume: UploadFile | None,
    project_name: str,
    settings: Settings | None = None,
) -> bytes:
    """POST the dataset files to the packaging service and return the archive.

    Args:
        value: Value dataset file (required).
        volume: Optional volume dataset file.
        project_name: Name of the generated project.
        settings: Optional settings; read from the environment when omitted.

    Returns:
        The zip archive bytes.

    Raises:
        PackageExportError: on missing inputs, transport failure or a
            non-success response.
    """
    files, data = build_package_files(value, volume, project_name)
    s = settings or get_settings()

    import requests  # type: ignore[import-untyped]  # local import to avoid requiring type stubs at module import

    log.info("Requesting dashboard package %r from %s", data[PROJECT_FIELD], s.package_service_url)
    try:
        r = requests.post(s.package_service_url, files=files, data=data, timeout=s.request_timeout)
    except requests.RequestException as e:
        raise PackageExportError(f"{DEFAULT_ERROR}: {e}") from e

    if not r.ok:
        err = error_from_response(r)
        log.warning("Packaging service returned %d: %s", r.status_code, err)
        raise err
    return r.content


def save_package(content: bytes, out_dir: Path, project_name: str) -> Path:
    """Write the archive to `<out_dir>/<project_name>.zip` and return the path."""
    out_dir.mkdir(parents=True, exist_ok=True)
    out_path = out_dir / f"{Path(project_name.strip()).name}.zip"
    out_path.write_bytes(content)
    log.info("Saved: %s (%d bytes)", out_path, len(content))
    return out_path


def download_package(
    value: UploadFile | None,
    volume: UploadFile | None,
    project_name: str,
    out_dir: Path,
    settings: Settings | None = None,
) -> Path:
    """Request a package and save it locally; see `request_package`."""
    content = request_package(value, volume, project_name, settings=settings)
    return save_package(content, out_dir, project_name)
