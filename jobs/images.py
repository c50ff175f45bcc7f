# jobs/images.py
"""
Per-listing logo and banner. Uploading one switches the listing away from
the company's image; deleting it switches back.
"""
import logging

from django.db import transaction
from django.utils import timezone

from jobboard.images import (
    COVER_SIZES, IMAGE_TYPES, ImageProcessingError, cover, delete_file, delete_image_variations,
    encode_image, file_exists, generate_filename, metadata_fields, mime_type_of, read_image,
    store_image,
)

logger = logging.getLogger(__name__)

DIRECTORIES = {
    'logo': 'job-listing-images/logos',
    'banner': 'job-listing-images/banners',
}


def _check_type(image_type):
    if image_type not in IMAGE_TYPES:
        raise ValueError(f"Invalid image type: {image_type}")


def upload_job_listing_image(listing, uploaded_file, image_type):
    _check_type(image_type)

    try:
        old_path = getattr(listing, f'{image_type}_path')
        if file_exists(old_path):
            delete_file(old_path)

        image = read_image(uploaded_file)
        processed = cover(image, COVER_SIZES[image_type])

        filename = generate_filename('job-listing', listing.pk, image_type, uploaded_file)
        path = store_image(f"{DIRECTORIES[image_type]}/{filename}", encode_image(processed), image_type)
    except (OSError, ValueError, ImageProcessingError) as exc:
        logger.error(
            "Job listing %s upload failed for listing %s (%s): %s",
            image_type, listing.pk, uploaded_file.name, exc,
        )
        if isinstance(exc, ImageProcessingError):
            raise
        raise ImageProcessingError(f"Failed to process {image_type}: {exc}") from exc

    values = {
        'path': path,
        'original_name': uploaded_file.name,
        'file_size': uploaded_file.size,
        'mime_type': mime_type_of(image),
        'dimensions': {'width': processed.width, 'height': processed.height},
        'uploaded_at': timezone.now(),
    }
    for suffix, value in values.items():
        setattr(listing, f'{image_type}_{suffix}', value)
    setattr(listing, f'use_company_{image_type}', False)
    listing.save(update_fields=metadata_fields(image_type) + [f'use_company_{image_type}', 'updated_at'])

    logger.info("Job listing %s uploaded %s %s", listing.pk, image_type, path)
    return path


@transaction.atomic
def delete_job_listing_image(listing, image_type):
    _check_type(image_type)

    path = getattr(listing, f'{image_type}_path')
    if not path:
        return True

    deleted = delete_file(path)
    delete_image_variations(path)
    if deleted:
        for field in metadata_fields(image_type):
            setattr(listing, field, None)
        setattr(listing, f'use_company_{image_type}', True)
        listing.save(update_fields=metadata_fields(image_type) + [f'use_company_{image_type}', 'updated_at'])
    return deleted
