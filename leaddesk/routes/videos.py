"""
Video routes: metadata CRUD plus upload/download through the videos bucket.
"""
import logging
import os
import unicodedata
from urllib.parse import quote

from flask import Blueprint, request, jsonify, Response

from leaddesk.auth import current_user
from leaddesk.config import VIDEOS_BUCKET, VIDEO_MAX_BYTES
from leaddesk.database import get_session
from leaddesk.models.category import Category
from leaddesk.models.video import Video
from leaddesk.services import storage
from leaddesk.services.activity import log_activity

logger = logging.getLogger('routes.videos')

bp = Blueprint('videos', __name__)

EDITABLE_FIELDS = ('category_id', 'title', 'description')
DEFAULT_DOWNLOAD_NAME = 'video.mp4'


@bp.route('/api/videos')
def list_videos():
    try:
        if not storage.bucket_exists():
            return jsonify({'error': 'Videos bucket not found', 'videos': []}), 404
    except storage.StorageError as e:
        logger.error("Error checking buckets: %s", e)

    session = get_session()
    try:
        videos = session.query(Video).order_by(Video.created_at.desc(), Video.id.desc()).all()
        return jsonify({'videos': [v.to_dict(url=storage.public_url(v.filepath)) for v in videos]})
    except Exception:
        logger.error("Error fetching videos", exc_info=True)
        return jsonify({'error': 'Failed to fetch videos'}), 500
    finally:
        session.close()


@bp.route('/api/videos', methods=['POST'])
def upload_video():
    upload = request.files.get('file')
    if upload is None or not upload.filename:
        return jsonify({'error': 'No file provided'}), 400

    mime_type = upload.mimetype or ''
    if not mime_type.startswith('video/'):
        return jsonify({'error': 'Please select a valid video file'}), 400

    data = upload.read()
    if len(data) > VIDEO_MAX_BYTES:
        return jsonify({'error': 'File size must be less than 100MB'}), 400

    category_id = request.form.get('category_id') or None
    title = (request.form.get('title') or '').strip() or os.path.splitext(upload.filename)[0]
    description = (request.form.get('description') or '').strip() or None
    key = storage.make_object_key(upload.filename)

    session = get_session()
    try:
        if category_id and session.get(Category, category_id) is None:
            return jsonify({'error': 'Category not found'}), 400

        try:
            storage.upload_video(key, data, mime_type)
        except storage.StorageError as e:
            logger.error("Upload of %s failed: %s", upload.filename, e)
            return jsonify({'error': 'Failed to upload video'}), 500

        video = Video(
            title=title,
            description=description,
            filename=upload.filename,
            filepath=key,
            filesize=len(data),
            mime_type=mime_type,
            upload_status='completed',
            category_id=category_id,
        )
        session.add(video)
        session.commit()
        session.refresh(video)
        payload = video.to_dict(url=storage.public_url(key))
    except Exception:
        session.rollback()
        logger.error("Error saving video record for %s", key, exc_info=True)
        return jsonify({'error': 'Failed to save video'}), 500
    finally:
        session.close()

    log_activity(current_user(), 'upload_video', 'video', payload['id'], {
        'filename': upload.filename, 'filesize': len(data),
    })
    return jsonify({'video': payload}), 201


@bp.route('/api/videos/<video_id>', methods=['PATCH'])
def update_video(video_id):
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = {}
    updates = {k: data[k] for k in EDITABLE_FIELDS if k in data}
    if not updates:
        return jsonify({'error': 'No valid fields to update'}), 400
    if 'category_id' in updates:
        updates['category_id'] = updates['category_id'] or None

    session = get_session()
    try:
        video = session.get(Video, video_id)
        if video is None:
            return jsonify({'error': 'Video not found'}), 404
        if updates.get('category_id') and session.get(Category, updates['category_id']) is None:
            return jsonify({'error': 'Category not found'}), 400

        for field, value in updates.items():
            setattr(video, field, value)
        session.commit()
        session.refresh(video)
        payload = video.to_dict(url=storage.public_url(video.filepath))
    except Exception:
        session.rollback()
        logger.error("Error updating video %s", video_id, exc_info=True)
        return jsonify({'error': 'Failed to update video'}), 500
    finally:
        session.close()

    log_activity(current_user(), 'update_video', 'video', video_id, {'updates': updates})
    return jsonify({'video': payload})


@bp.route('/api/videos/<video_id>', methods=['DELETE'])
def delete_video(video_id):
    session = get_session()
    try:
        video = session.get(Video, video_id)
        if video is None:
            return jsonify({'error': 'Video not found'}), 404

        try:
            storage.delete_video(video.filepath)
        except storage.StorageError as e:
            # The record is removed even when the object delete fails
            logger.error("Error deleting stored object %s: %s", video.filepath, e)

        filename = video.filename
        session.delete(video)
        session.commit()
    except Exception:
        session.rollback()
        logger.error("Error deleting video %s", video_id, exc_info=True)
        return jsonify({'error': 'Failed to delete video'}), 500
    finally:
        session.close()

    log_activity(current_user(), 'delete_video', 'video', video_id, {'filename': filename})
    return jsonify({'success': True})


@bp.route('/api/videos/download')
def download_video():
    path = request.args.get('path')
    filename = request.args.get('filename')
    if not path:
        return jsonify({'error': 'Path is required'}), 400

    try:
        body, content_type, size = storage.download_video(path)
    except storage.StorageError as e:
        logger.error("Download of %s failed: %s", path, e)
        return jsonify({'error': 'Failed to download file'}), 500

    return Response(body, headers={
        'Content-Type': content_type,
        'Content-Disposition': content_disposition(filename),
        'Content-Length': str(size),
    })


def content_disposition(filename):
    """Attachment header for a user-supplied filename: printable, quoted, RFC 5987 for non-ASCII."""
    name = os.path.basename((filename or '').replace('\\', '/'))
    name = ''.join(ch for ch in name if ch.isprintable()).strip() or DEFAULT_DOWNLOAD_NAME
    fallback = unicodedata.normalize('NFKD', name).encode('ascii', 'ignore').decode('ascii').strip()
    fallback = (fallback or DEFAULT_DOWNLOAD_NAME).replace('\\', '\\\\').replace('"', '\\"')
    header = f'attachment; filename="{fallback}"'
    if not name.isascii():
        header += f"; filename*=UTF-8''{quote(name, safe='')}"
    return header


@bp.route('/api/videos/setup')
def setup_bucket():
    try:
        created = storage.ensure_bucket()
    except storage.StorageError as e:
        logger.error("Bucket setup failed: %s", e)
        return jsonify({'error': str(e)}), 500

    message = 'Bucket created successfully' if created else 'Bucket already exists'
    return jsonify({'message': message, 'bucketName': VIDEOS_BUCKET})
