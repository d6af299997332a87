import logging
import os

from django.core.files.storage import default_storage
from django.utils import timezone
from django.utils.text import slugify

from .exceptions import PersistenceError

logger = logging.getLogger(__name__)


def image_filename(name, original_name, now=None):
    '''``<slug>-<YYYY-mm-dd-HHMMSS><ext>`` for an uploaded image'''
    now = now or timezone.now()
    extension = os.path.splitext(original_name or '')[1].lower()
    slug = slugify(name or '') or 'image'
    return f"{slug}-{now.strftime('%Y-%m-%d-%H%M%S')}{extension}"


def attach_image(record, upload, storage=None, namespace='products', name_field='name'):
    '''Store ``upload`` and point ``record.image`` at it.

    Returns the stored filename, or None when there is nothing to store.
    The record is not saved here. A previously attached image stays in
    storage.
    '''
    if not upload:
        return None

    storage = storage or default_storage
    filename = image_filename(getattr(record, name_field, ''), upload.name)
    try:
        # Storage.save picks a free name instead of overwriting
        stored = storage.save(f'{namespace}/{filename}', upload)
    except OSError as exc:
        logger.error('Could not store image %s: %s', filename, exc)
        raise PersistenceError('Unable to store the uploaded image.') from exc

    record.image = os.path.basename(stored)
    logger.info('Stored image %s for %s', stored, record)
    return record.image
