"""
Local disk storage for multipart uploads.

Files land in ``UPLOAD_FOLDER/images`` or ``UPLOAD_FOLDER/documents`` and are
served back from ``/uploads/<kind>/<filename>``. Handlers save first and call
``remove_files`` when anything after the save fails.
"""
import logging
import os
import secrets
import time

from flask import current_app
from werkzeug.utils import secure_filename

from realty_admin.errors import ValidationFailed

logger = logging.getLogger(__name__)

IMAGES = 'images'
DOCUMENTS = 'documents'

_IMAGE_TYPES = ('image/jpeg', 'image/png', 'image/jpg')


def _file_size(storage):
    stream = storage.stream
    position = stream.tell()
    stream.seek(0, os.SEEK_END)
    size = stream.tell()
    stream.seek(position)
    return size


def _validate(storage, kind):
    allowed = current_app.config['ALLOWED_FILE_TYPES']
    if kind == IMAGES:
        allowed = [t for t in allowed if t in _IMAGE_TYPES]

    if storage.mimetype not in allowed:
        return f"Invalid file type for {storage.filename}. Allowed types: {', '.join(allowed)}"
    if _file_size(storage) > current_app.config['MAX_FILE_SIZE']:
        return f"File {storage.filename} is too large"
    return None


def save_uploads(files, kind, field):
    """
    Validate and write ``files`` to disk.

    Returns a list of dicts ``{path, filename, original_name, url, mimetype}``.
    Nothing stays on disk if any of the files is rejected.
    """
    saved = []
    files = [f for f in files if f and f.filename]
    if not files:
        return saved

    folder = os.path.join(current_app.config['UPLOAD_FOLDER'], kind)
    os.makedirs(folder, exist_ok=True)

    try:
        for storage in files:
            error = _validate(storage, kind)
            if error:
                raise ValidationFailed(errors=[{"field": field, "message": error, "value": storage.filename}])

            original = secure_filename(storage.filename) or 'upload'
            _, ext = os.path.splitext(original)
            filename = f"{field}-{int(time.time() * 1000)}-{secrets.token_hex(4)}{ext.lower()}"
            path = os.path.join(folder, filename)
            storage.save(path)
            saved.append({
                "path": path,
                "filename": filename,
                "original_name": storage.filename,
                "url": f"/uploads/{kind}/{filename}",
                "mimetype": storage.mimetype,
            })
    except Exception:
        remove_files(saved)
        raise

    logger.debug("Saved %d upload(s) to %s", len(saved), folder)
    return saved


def remove_files(saved):
    """Best-effort removal of files returned by ``save_uploads``."""
    for item in saved:
        remove_path(item.get('path'))


def remove_path(path):
    if not path:
        return
    try:
        if os.path.exists(path):
            os.remove(path)
    except OSError as e:
        logger.warning("Could not remove upload %s: %s", path, e)


def path_for_url(url):
    """Map a ``/uploads/<kind>/<name>`` url back to its location on disk."""
    if not url or not url.startswith('/uploads/'):
        return None
    relative = url[len('/uploads/'):]
    kind, _, filename = relative.partition('/')
    if kind not in (IMAGES, DOCUMENTS) or not filename:
        return None
    return os.path.join(current_app.config['UPLOAD_FOLDER'], kind, secure_filename(filename))
