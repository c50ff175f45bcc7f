# companies/tests/test_images.py
import re
import shutil
import tempfile

from django.core.files.base import ContentFile
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import TestCase, override_settings
from PIL import Image

from accounts.tests.factories import image_upload, make_company
from companies.forms import BannerUploadForm, LogoUploadForm, fails_ratio
from companies.images import delete_company_image, upload_career_page_image, upload_company_image
from jobboard.images import (
    ImageProcessingError, delete_image_variations, format_file_size, generate_filename, public_storage,
)

MEDIA_ROOT = tempfile.mkdtemp()


@override_settings(MEDIA_ROOT=MEDIA_ROOT)
class MediaTestCase(TestCase):
    @classmethod
    def tearDownClass(cls):
        shutil.rmtree(MEDIA_ROOT, ignore_errors=True)
        super().tearDownClass()


class HelpersTest(MediaTestCase):
    def test_format_file_size(self):
        self.assertEqual(format_file_size(0), '0 B')
        self.assertEqual(format_file_size(512), '512 B')
        self.assertEqual(format_file_size(1024), '1 KB')
        self.assertEqual(format_file_size(1536), '1.5 KB')
        self.assertEqual(format_file_size(5 * 1024 * 1024), '5 MB')

    def test_generate_filename(self):
        name = generate_filename('company', 7, 'logo', image_upload(10, 10, name='My Logo.PNG'))
        self.assertRegex(name, r'^company-7-logo-\d{4}-\d{2}-\d{2}_\d{2}-\d{2}-\d{2}-[A-Za-z0-9]{8}\.PNG$')

    def test_delete_image_variations(self):
        storage = public_storage()
        for name in ('logo.png', 'logo_100x100.png', 'logo_400x400.png', 'logo_small.png', 'other_100x100.png'):
            storage.save(f'variations/{name}', ContentFile(b'x'))

        delete_image_variations('variations/logo.png')

        _dirs, files = storage.listdir('variations')
        self.assertEqual(sorted(files), ['logo.png', 'logo_small.png', 'other_100x100.png'])

    def test_delete_image_variations_without_extension(self):
        storage = public_storage()
        storage.save('plain/banner', ContentFile(b'x'))
        storage.save('plain/banner_1200x400', ContentFile(b'x'))
        storage.save('plain/banner_1200x400.png', ContentFile(b'x'))

        delete_image_variations('plain/banner')

        _dirs, files = storage.listdir('plain')
        self.assertEqual(sorted(files), ['banner', 'banner_1200x400.png'])

    def test_delete_image_variations_missing_directory(self):
        delete_image_variations('does-not-exist/logo.png')
        delete_image_variations('logo.png')


class CompanyImageTest(MediaTestCase):
    def setUp(self):
        self.company = make_company()

    def test_logo_is_cover_cropped_and_metadata_saved(self):
        path = upload_company_image(self.company, image_upload(800, 600, name='acme.png'), 'logo')

        self.assertTrue(path.startswith('company-images/logos/company-%d-logo-' % self.company.pk))
        with public_storage().open(path) as stored:
            self.assertEqual(Image.open(stored).size, (400, 400))

        self.company.refresh_from_db()
        self.assertEqual(self.company.logo_path, path)
        self.assertEqual(self.company.logo_original_name, 'acme.png')
        self.assertEqual(self.company.logo_mime_type, 'image/png')
        self.assertEqual(self.company.logo_dimensions, {'width': 800, 'height': 600})
        self.assertIsNotNone(self.company.logo_uploaded_at)
        self.assertTrue(self.company.has_logo())

    def test_banner_is_cover_cropped(self):
        path = upload_company_image(self.company, image_upload(1500, 900, name='b.jpg', fmt='JPEG'), 'banner')
        self.assertTrue(path.startswith('company-images/banners/'))
        with public_storage().open(path) as stored:
            image = Image.open(stored)
            self.assertEqual(image.size, (1200, 400))
            self.assertEqual(image.format, 'JPEG')

    def test_replacing_deletes_the_previous_file(self):
        first = upload_company_image(self.company, image_upload(400, 400), 'logo')
        second = upload_company_image(self.company, image_upload(400, 400), 'logo')
        self.assertNotEqual(first, second)
        self.assertFalse(public_storage().exists(first))
        self.assertTrue(public_storage().exists(second))

    def test_invalid_type(self):
        with self.assertRaisesMessage(ValueError, 'Invalid image type: avatar'):
            upload_company_image(self.company, image_upload(400, 400), 'avatar')
        with self.assertRaisesMessage(ValueError, 'Invalid image type: avatar'):
            delete_company_image(self.company, 'avatar')

    def test_garbage_upload_raises_processing_error(self):
        upload = SimpleUploadedFile('logo.png', b'not an image', content_type='image/png')
        with self.assertRaises(ImageProcessingError):
            upload_company_image(self.company, upload, 'logo')

    def test_delete_clears_metadata_and_variations(self):
        path = upload_company_image(self.company, image_upload(400, 400, name='l.png'), 'logo')
        variation = re.sub(r'\.png$', '_100x100.png', path)
        public_storage().save(variation, ContentFile(b'x'))

        self.assertTrue(delete_company_image(self.company, 'logo'))

        self.assertFalse(public_storage().exists(path))
        self.assertFalse(public_storage().exists(variation))
        self.company.refresh_from_db()
        self.assertIsNone(self.company.logo_path)
        self.assertIsNone(self.company.logo_dimensions)
        self.assertIsNone(self.company.logo_uploaded_at)

    def test_delete_without_image(self):
        self.assertTrue(delete_company_image(self.company, 'banner'))

    def test_delete_with_missing_file_still_clears_metadata(self):
        self.company.logo_path = 'company-images/logos/gone.png'
        self.company.logo_original_name = 'gone.png'
        self.company.save()

        self.assertTrue(delete_company_image(self.company, 'logo'))
        self.company.refresh_from_db()
        self.assertIsNone(self.company.logo_path)
        self.assertIsNone(self.company.logo_original_name)


class CareerPageImageTest(MediaTestCase):
    def setUp(self):
        self.company = make_company()

    def test_too_small(self):
        with self.assertRaisesMessage(ImageProcessingError, 'Image dimensions must be at least 752x480 pixels.'):
            upload_career_page_image(self.company, image_upload(751, 600))

    def test_wide_images_are_scaled_down(self):
        path = upload_career_page_image(self.company, image_upload(1600, 1000))
        self.assertTrue(path.startswith('company-images/career-page/company-%d-career-' % self.company.pk))
        with public_storage().open(path) as stored:
            self.assertEqual(Image.open(stored).size, (1200, 750))

    def test_narrow_images_are_kept(self):
        path = upload_career_page_image(self.company, image_upload(800, 500))
        with public_storage().open(path) as stored:
            self.assertEqual(Image.open(stored).size, (800, 500))


class UploadFormTest(TestCase):
    def form(self, form_class, field, upload):
        return form_class(data={}, files={field: upload})

    def test_logo_rules(self):
        self.assertTrue(self.form(LogoUploadForm, 'logo', image_upload(320, 320)).is_valid())

        small = self.form(LogoUploadForm, 'logo', image_upload(300, 300))
        self.assertFalse(small.is_valid())
        self.assertEqual(
            small.errors['logo'], ['The logo must be at least 320x320 pixels with a 1:1 aspect ratio.'],
        )

        wide = self.form(LogoUploadForm, 'logo', image_upload(640, 320))
        self.assertFalse(wide.is_valid())

    def test_logo_format(self):
        form = self.form(LogoUploadForm, 'logo', image_upload(320, 320, name='logo.gif', fmt='GIF'))
        self.assertFalse(form.is_valid())
        self.assertEqual(form.errors['logo'], ['The logo must be a PNG or JPG file.'])

    def test_not_an_image(self):
        form = LogoUploadForm(data={}, files={'logo': ContentFile(b'plain text', name='logo.png')})
        self.assertFalse(form.is_valid())

    def test_banner_rules(self):
        self.assertTrue(self.form(BannerUploadForm, 'banner', image_upload(1200, 400)).is_valid())
        self.assertFalse(self.form(BannerUploadForm, 'banner', image_upload(1200, 600)).is_valid())
        self.assertFalse(self.form(BannerUploadForm, 'banner', image_upload(900, 300)).is_valid())

    def test_ratio_tolerance(self):
        self.assertFalse(fails_ratio(1200, 400, 3))
        self.assertTrue(fails_ratio(1210, 400, 3))
        self.assertFalse(fails_ratio(500, 500, 1))
