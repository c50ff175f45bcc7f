# jobboard/images.py
"""
Shared image pipeline for branding uploads.

Files live on the ``public`` storage; every helper works with paths
relative to that storage root.
"""
import io
import logging
import math
import posixpath
import re

from django.core.files.base import ContentFile
from django.core.files.storage import storages
from django.utils import timezone
from django.utils.crypto import get_random_string
from PIL import Image, ImageOps

logger = logging.getLogger(__name__)

LOGO = 'logo'
BANNER = 'banner'
IMAGE_TYPES = (LOGO, BANNER)

COVER_SIZES = {
    LOGO: (400, 400),
    BANNER: (1200, 400),
}

METADATA_SUFFIXES = ('path', 'original_name', 'file_size', 'mime_type', 'dimensions', 'uploaded_at')


class ImageProcessingError(RuntimeError):
    pass


def public_storage():
    return storages['public']


def metadata_fields(image_type):
    return [f'{image_type}_{suffix}' for suffix in METADATA_SUFFIXES]


def client_extension(uploaded_file):
    return posixpath.splitext(uploaded_file.name or '')[1].lstrip('.')


def generate_filename(prefix, owner_id, kind, uploaded_file):
    """<prefix>-<id>-<kind>-<Y-m-d_H-i-s>-<8 random chars>.<client extension>"""
    timestamp = timezone.now().strftime('%Y-%m-%d_%H-%M-%S')
    return f"{prefix}-{owner_id}-{kind}-{timestamp}-{get_random_string(8)}.{client_extension(uploaded_file)}"


def read_image(uploaded_file):
    uploaded_file.seek(0)
    image = Image.open(uploaded_file)
    image_format = image.format
    image = ImageOps.exif_transpose(image)
    # exif_transpose may hand back a copy without the format attribute
    image.format = image_format
    return image


def mime_type_of(image):
    return Image.MIME.get(image.format or '', 'application/octet-stream')


def cover(image, size):
    """Resize to fill ``size`` completely and crop the overflow around the centre."""
    result = ImageOps.fit(image, size, method=Image.Resampling.LANCZOS)
    result.format = image.format
    return result


def scale_to_width(image, width):
    height = max(1, round(image.height * width / image.width))
    result = image.resize((width, height), Image.Resampling.LANCZOS)
    result.format = image.format
    return result


def encode_image(image):
    """Encode using the image's own format (JPEG and friends need RGB)."""
    image_format = image.format or 'PNG'
    if image_format in ('JPEG', 'MPO'):
        image_format = 'JPEG'
        if image.mode not in ('RGB', 'L'):
            image = image.convert('RGB')
    buffer = io.BytesIO()
    image.save(buffer, format=image_format)
    return buffer.getvalue()


def store_image(path, data, label='image'):
    stored = public_storage().save(path, ContentFile(data))
    if not stored:
        raise ImageProcessingError(f"Failed to store {label}.")
    return stored


def file_exists(path):
    return bool(path) and public_storage().exists(path)


def delete_file(path):
    if not path:
        return True
    try:
        public_storage().delete(path)
    except OSError as exc:
        logger.error("Could not delete %s: %s", path, exc)
        return False
    return True


def delete_image_variations(path):
    """
    Remove resized copies living next to ``path``, named
    ``<stem>_<width>x<height>.<ext>`` (or without extension when the
    original has none).
    """
    directory, basename = posixpath.split(path)
    stem, extension = posixpath.splitext(basename)
    if not stem or not directory:
        return

    storage = public_storage()
    if not storage.exists(directory):
        return

    pattern = re.compile(
        '^' + re.escape(stem) + r'_\d+x\d+' + (re.escape(extension) if extension else '') + '$'
    )
    _dirs, files = storage.listdir(directory)
    for name in files:
        if pattern.match(name):
            storage.delete(posixpath.join(directory, name))
            logger.info("Deleted image variation %s", posixpath.join(directory, name))


def public_url(path):
    if not path:
        return None
    return public_storage().url(path)


def format_file_size(size):
    units = ['B', 'KB', 'MB', 'GB']
    size = max(size, 0)
    power = math.floor(math.log(size) / math.log(1024)) if size else 0
    power = min(power, len(units) - 1)
    value = round(size / 1024 ** power, 2)
    return f"{value:g} {units[power]}"
