from typing import Any

import httpx

from pds_mcp.core.config import Settings
from pds_mcp.core.envelope import BODY, PATH, EndpointDescriptor, Param
from pds_mcp.tools import make_binding
from pds_mcp.utils.response_utils import BINARY, TEXT

DOWNLOAD_JOB_DATA = EndpointDescriptor(
    name="download_job_data",
    action="downloading the ZIP file",
    method="GET",
    path="/dataservice/download/{jobId}",
    params=(Param("job_id", "jobId", PATH, required=True),),
    success_type=BINARY,
    failure_type=TEXT,
)

VIEW_JOB_STATUS = EndpointDescriptor(
    name="view_job_status",
    action="viewing job status",
    method="POST",
    path="/dataservice/jobStatus",
    params=(
        Param("job_ids", "jobIds", BODY, required=True),
        Param("job_type", "jobType", BODY, required=True),
        Param("job_status", "jobStatus", BODY, required=True),
    ),
)


def get_tools(settings: Settings, transport: httpx.AsyncBaseTransport | None = None) -> dict[str, Any]:
    download = make_binding(DOWNLOAD_JOB_DATA, settings, transport)
    status = make_binding(VIEW_JOB_STATUS, settings, transport)

    async def download_job_data(job_id: str) -> Any:
        """Download the ZIP file produced by a scheduled job.

        Returns the raw bytes of the archive, or {"error": ...}.
        """
        return await download(job_id=job_id)

    async def view_job_status(job_ids: list[str], job_type: str, job_status: str) -> Any:
        """View the status of data service jobs.

        Args:
            job_ids: IDs of the jobs to check.
            job_type: The type of job, e.g. "EXPORT_DATA".
            job_status: The status to filter on, e.g. "COMPLETED_WITH_WARNINGS".
        """
        return await status(job_ids=job_ids, job_type=job_type, job_status=job_status)

    return {
        "download_job_data": {
            "func": download_job_data,
            "title": "Download job data",
            "description": "Download the ZIP file of a scheduled job by job ID. The archive is returned base64 encoded.",
        },
        "view_job_status": {
            "func": view_job_status,
            "title": "View job status",
            "description": "View the status of jobs in the Primavera Data Service.",
        },
    }
