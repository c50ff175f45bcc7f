# companies/images.py
"""
Company branding: logo and banner (cover-cropped) and the career page
header image (scaled down, never up).
"""
import logging

from django.utils import timezone

from jobboard.images import (
    COVER_SIZES, IMAGE_TYPES, ImageProcessingError, cover, delete_file, delete_image_variations,
    encode_image, file_exists, generate_filename, metadata_fields, mime_type_of, read_image,
    scale_to_width, store_image,
)

logger = logging.getLogger(__name__)

CAREER_PAGE_MIN_SIZE = (752, 480)
CAREER_PAGE_MAX_WIDTH = 1200

DIRECTORIES = {
    'logo': 'company-images/logos',
    'banner': 'company-images/banners',
    'career_page': 'company-images/career-page',
}


def _check_type(image_type):
    if image_type not in IMAGE_TYPES:
        raise ValueError(f"Invalid image type: {image_type}")


def upload_company_image(company, uploaded_file, image_type):
    """
    Replace the company's logo or banner with ``uploaded_file``.
    Returns the stored path.
    """
    _check_type(image_type)

    try:
        old_path = getattr(company, f'{image_type}_path')
        if file_exists(old_path):
            delete_file(old_path)

        image = read_image(uploaded_file)
        original_size = image.size
        processed = cover(image, COVER_SIZES[image_type])

        filename = generate_filename('company', company.pk, image_type, uploaded_file)
        path = store_image(f"{DIRECTORIES[image_type]}/{filename}", encode_image(processed), image_type)
    except (OSError, ValueError, ImageProcessingError) as exc:
        logger.error(
            "Company %s upload failed for company %s (%s): %s",
            image_type, company.pk, uploaded_file.name, exc,
        )
        if isinstance(exc, ImageProcessingError):
            raise
        raise ImageProcessingError(f"Failed to process {image_type}: {exc}") from exc

    values = {
        'path': path,
        'original_name': uploaded_file.name,
        'file_size': uploaded_file.size,
        'mime_type': mime_type_of(image),
        'dimensions': {'width': original_size[0], 'height': original_size[1]},
        'uploaded_at': timezone.now(),
    }
    for suffix, value in values.items():
        setattr(company, f'{image_type}_{suffix}', value)
    company.save(update_fields=metadata_fields(image_type) + ['updated_at'])

    logger.info("Company %s uploaded %s %s", company.pk, image_type, path)
    return path


def delete_company_image(company, image_type):
    _check_type(image_type)

    path = getattr(company, f'{image_type}_path')
    if not path:
        return True

    deleted = True
    if file_exists(path):
        deleted = delete_file(path)
    delete_image_variations(path)

    # metadata goes even when the file was already missing
    for field in metadata_fields(image_type):
        setattr(company, field, None)
    company.save(update_fields=metadata_fields(image_type) + ['updated_at'])
    return deleted


def upload_career_page_image(company, uploaded_file):
    """Store the career page header image and return its relative path."""
    try:
        image = read_image(uploaded_file)
        min_width, min_height = CAREER_PAGE_MIN_SIZE
        if image.width < min_width or image.height < min_height:
            raise ImageProcessingError(
                f"Image dimensions must be at least {min_width}x{min_height} pixels."
            )

        if image.width > CAREER_PAGE_MAX_WIDTH:
            image = scale_to_width(image, CAREER_PAGE_MAX_WIDTH)

        filename = generate_filename('company', company.pk, 'career', uploaded_file)
        return store_image(f"{DIRECTORIES['career_page']}/{filename}", encode_image(image), 'career page image')
    except (OSError, ValueError, ImageProcessingError) as exc:
        logger.error(
            "Career page image upload failed for company %s (%s): %s",
            company.pk, uploaded_file.name, exc,
        )
        if isinstance(exc, ImageProcessingError):
            raise
        raise ImageProcessingError(f"Failed to process career page image: {exc}") from exc
