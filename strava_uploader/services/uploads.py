import logging
import os
import threading

from ..errors import (
    PollingCancelled,
    ProcessingTimeout,
    UnsupportedFileType,
    UpstreamProcessingError,
)

logger = logging.getLogger(__name__)

READY_STATUS = "Your activity is ready."
SUPPORTED_TYPES = ("fit", "tcx", "gpx")


def data_type_for(filename: str) -> str:
    """Strava data_type for a filename, e.g. ``run.FIT`` -> ``fit``, ``run.tcx.gz`` -> ``tcx.gz``."""
    parts = (filename or "").lower().rsplit(".", 2)
    if len(parts) >= 3 and parts[-1] == "gz" and parts[-2] in SUPPORTED_TYPES:
        return f"{parts[-2]}.gz"
    if len(parts) >= 2 and parts[-1] in SUPPORTED_TYPES:
        return parts[-1]
    raise UnsupportedFileType(
        "Unsupported file type. Use .gpx, .fit or .tcx (optionally .gz)."
    )


def new_upload_job(path, filename, title=None):
    return {
        'path': path,
        'filename': filename,
        'data_type': data_type_for(filename),
        'title': title,
        'upload_id': None,
        'status': 'queued',
        'activity_id': None,
        'error': None,
    }


def discard_file(path):
    try:
        if path and os.path.exists(path):
            os.remove(path)
            logger.info(f"Cleaned up temp file {path}")
    except OSError as e:
        logger.warning(f"Failed to clean temp file {path}: {e}")


def is_ready(status_payload, ready_status=READY_STATUS):
    # The activity id can show up before the final status text does
    return status_payload.get('status') == ready_status or bool(status_payload.get('activity_id'))


def wait_for_activity(client, access_token, job, attempts=20, interval=3.0,
                      stop_event=None, ready_status=READY_STATUS):
    """
    Poll Strava until the upload in ``job`` turns into an activity.

    Each attempt waits ``interval`` seconds first. Waiting is done on
    ``stop_event`` so a shutdown can cut the loop short.

    Returns the activity id (may be None if Strava reported ready without one).

    Raises:
        UpstreamProcessingError: the status response carried an ``error``.
        ProcessingTimeout: ``attempts`` polls passed without a result.
        PollingCancelled: ``stop_event`` was set while waiting.
    """
    stop_event = stop_event or threading.Event()
    upload_id = job['upload_id']
    logger.info(f"Polling for upload status of {upload_id}")

    for attempt in range(1, attempts + 1):
        if stop_event.wait(interval):
            job['status'] = 'cancelled'
            raise PollingCancelled("Upload polling was cancelled before Strava finished processing.")

        result = client.get_upload_status(access_token, upload_id)
        job['status'] = result.get('status') or job['status']
        logger.info(f"Poll attempt {attempt}: {result.get('status')}")

        if is_ready(result, ready_status):
            job['activity_id'] = result.get('activity_id')
            job['status'] = 'ready'
            logger.info(f"Activity ready: {result}")
            return job['activity_id']
        if result.get('error'):
            job['error'] = result['error']
            job['status'] = 'errored'
            logger.error(f"Upload failed: {result['error']}")
            raise UpstreamProcessingError(str(result['error']), payload=result['error'])

    job['status'] = 'timeout'
    logger.error(f"Upload {upload_id} not processed after {attempts} attempts")
    raise ProcessingTimeout("Timeout: Strava didn't finish processing within expected time.")


def upload_activity(client, path, filename, title=None, attempts=20, interval=3.0,
                    default_name="Uploaded from EnduranceARC T-Rex3", stop_event=None,
                    ready_status=READY_STATUS):
    """Refresh a token, upload the file at ``path`` and wait for the activity.

    The local file is removed as soon as Strava has it, or on any failure
    before that point.
    """
    try:
        job = new_upload_job(path, filename, title)
        access_token = client.refresh_access_token()
        logger.info("Uploading file to Strava...")
        job['upload_id'] = client.upload_file(
            access_token,
            path,
            filename,
            job['data_type'],
            title or default_name,
        )
        job['status'] = 'processing'
    finally:
        discard_file(path)

    activity_id = wait_for_activity(
        client,
        access_token,
        job,
        attempts=attempts,
        interval=interval,
        stop_event=stop_event,
        ready_status=ready_status,
    )
    return {'activity_id': activity_id, 'message': 'Upload complete!'}
