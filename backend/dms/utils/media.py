import os
import uuid
from flask import current_app, has_app_context
from sqlalchemy import event
from sqlalchemy.orm import Session
from werkzeug.utils import secure_filename

ALLOWED_EXTENSIONS = {
    'pdf', 'doc', 'docx', 'xls', 'xlsx', 'ppt', 'pptx', 'odt', 'ods',
    'txt', 'csv', 'rtf', 'zip', 'png', 'jpg', 'jpeg', 'gif',
}

PENDING_CLEANUP_KEY = "dms_pending_file_cleanup"

def allowed_file(filename):
    return '.' in filename and filename.rsplit('.', 1)[1].lower() in ALLOWED_EXTENSIONS

def save_file(file):
    if not file.filename or not allowed_file(file.filename):
        raise ValueError("File type not allowed")

    filename = secure_filename(file.filename)
    ext = filename.rsplit('.', 1)[1].lower()
    unique_filename = f"{uuid.uuid4().hex}.{ext}"

    upload_folder = current_app.config.get('UPLOAD_FOLDER', 'uploads/documents')
    if not os.path.isabs(upload_folder):
        upload_folder = os.path.join(current_app.instance_path, upload_folder)
    os.makedirs(upload_folder, exist_ok=True)
    file_path = os.path.join(upload_folder, unique_filename)

    file.save(file_path)

    return file_path


def delete_file(file_url):
    """
    Deletes a stored document file given its path.
    Relative paths resolve against the instance folder.
    """
    if not file_url:
        return False

    file_path = file_url
    if not os.path.isabs(file_path):
        file_path = os.path.join(current_app.instance_path, file_path.lstrip('/'))

    if os.path.exists(file_path):
        try:
            os.remove(file_path)
            return True
        except OSError as e:
            current_app.logger.error("Failed to delete file %s: %s", file_path, e)
            return False
    return False


def schedule_file_cleanup(session, file_url):
    """Remove ``file_url`` from storage once ``session`` commits."""
    if file_url:
        session.info.setdefault(PENDING_CLEANUP_KEY, []).append(file_url)


def _cleanup_after_commit(session):
    pending = session.info.pop(PENDING_CLEANUP_KEY, [])
    if not pending or not has_app_context():
        return
    for file_url in pending:
        delete_file(file_url)


def _discard_after_rollback(session):
    session.info.pop(PENDING_CLEANUP_KEY, None)


def register_media_cleanup():
    if not event.contains(Session, "after_commit", _cleanup_after_commit):
        event.listen(Session, "after_commit", _cleanup_after_commit)
        event.listen(Session, "after_rollback", _discard_after_rollback)
