# companies/forms.py
import re

from django import forms
from django.core.exceptions import ValidationError
from django.core.validators import RegexValidator
from django.utils.translation import gettext as _

from accounts.forms import check_password_confirmation, run_password_validators
from accounts.models import Company
from jobboard.forms import ArrayField, OptionalBooleanField

FORMAT_EXTENSIONS = {
    'PNG': ('png',),
    'JPEG': ('jpg', 'jpeg'),
    'MPO': ('jpg', 'jpeg'),
    'GIF': ('gif',),
    'WEBP': ('webp',),
}

YOUTUBE_URL_RE = re.compile(r'^(https?://)?(www\.)?(youtube\.com|youtu\.be)/.*$')
SLUG_RE = r'^[a-zA-Z0-9-]+$'
DOMAIN_RE = r'^([a-zA-Z0-9]([a-zA-Z0-9\-]{0,61}[a-zA-Z0-9])?\.)+[a-zA-Z]{2,}$'
MAX_CAREER_PAGE_VIDEOS = 5


def image_extensions(uploaded):
    image = getattr(uploaded, 'image', None)
    return FORMAT_EXTENSIONS.get(getattr(image, 'format', None) or '', ())


def fails_ratio(width, height, ratio):
    precision = 1 / (max(width, height) + 1)
    return abs(ratio - width / height) > precision


def validate_image_rules(uploaded, *, extensions, messages, min_kb=None, max_kb=None,
                         min_width=None, min_height=None, ratio=None):
    """
    Apply mimes, min/max size (KB) and dimension rules to a file already
    accepted by ``forms.ImageField``. Raises the first failing rule's message.
    """
    if not set(image_extensions(uploaded)) & set(extensions):
        raise ValidationError(messages['mimes'], code='mimes')
    if min_kb is not None and uploaded.size < min_kb * 1024:
        raise ValidationError(messages['min'], code='min')
    if max_kb is not None and uploaded.size > max_kb * 1024:
        raise ValidationError(messages['max'], code='max')

    width, height = uploaded.image.size
    if (min_width and width < min_width) or (min_height and height < min_height):
        raise ValidationError(messages['dimensions'], code='dimensions')
    if ratio is not None and fails_ratio(width, height, ratio):
        raise ValidationError(messages['dimensions'], code='dimensions')
    return uploaded


LOGO_RULES = {
    'extensions': ('png', 'jpg', 'jpeg'),
    'min_kb': 1,
    'max_kb': 8 * 1024,
    'min_width': 320,
    'min_height': 320,
    'ratio': 1,
    'messages': {
        'mimes': 'The logo must be a PNG or JPG file.',
        'min': 'The logo must be at least 1KB.',
        'max': 'The logo may not be larger than 8MB.',
        'dimensions': 'The logo must be at least 320x320 pixels with a 1:1 aspect ratio.',
    },
}

BANNER_RULES = {
    'extensions': ('png', 'jpg', 'jpeg'),
    'min_kb': 1,
    'max_kb': 16 * 1024,
    'min_width': 1200,
    'min_height': 400,
    'ratio': 3,
    'messages': {
        'mimes': 'The banner must be a PNG or JPG file.',
        'min': 'The banner must be at least 1KB.',
        'max': 'The banner may not be larger than 16MB.',
        'dimensions': 'The banner must be at least 1200x400 pixels with a 3:1 aspect ratio.',
    },
}

CAREER_PAGE_IMAGE_RULES = {
    'extensions': ('jpeg', 'jpg', 'png', 'gif', 'webp'),
    'max_kb': 3584,
    'min_width': 752,
    'min_height': 480,
    'messages': {
        'mimes': 'The image must be in JPEG, PNG, GIF, or WebP format.',
        'max': 'The image must not be larger than 3.5MB.',
        'dimensions': 'The image must be at least 752x480 pixels.',
    },
}


def _image_field(label):
    return forms.ImageField(error_messages={
        'required': f'The {label} is required.',
        'invalid_image': f'The {label} must be a valid image file.',
        'invalid': f'The {label} must be a valid image file.',
    })


class LogoUploadForm(forms.Form):
    logo = _image_field('logo')

    def clean_logo(self):
        return validate_image_rules(self.cleaned_data['logo'], **LOGO_RULES)


class BannerUploadForm(forms.Form):
    banner = _image_field('banner')

    def clean_banner(self):
        return validate_image_rules(self.cleaned_data['banner'], **BANNER_RULES)


IMAGE_UPLOAD_FORMS = {
    'logo': LogoUploadForm,
    'banner': BannerUploadForm,
}


class CompanyProfileUpdateForm(forms.ModelForm):
    first_name = forms.CharField(max_length=100, required=False)
    last_name = forms.CharField(max_length=100, required=False)
    phone_number = forms.CharField(max_length=20, required=False)
    latitude = forms.DecimalField(min_value=-90, max_value=90, required=False)
    longitude = forms.DecimalField(min_value=-180, max_value=180, required=False)
    type = forms.CharField(max_length=50, required=False)
    description_english = forms.CharField(max_length=10000, required=False)
    description_german = forms.CharField(max_length=10000, required=False)
    description_french = forms.CharField(max_length=10000, required=False)
    description_italian = forms.CharField(max_length=10000, required=False)
    newsletter = OptionalBooleanField(required=False)

    class Meta:
        model = Company
        fields = [
            'name', 'first_name', 'last_name', 'phone_number',
            'address', 'postcode', 'city', 'latitude', 'longitude',
            'url', 'size', 'type', 'industry',
            'description_english', 'description_german', 'description_french', 'description_italian',
            'video', 'newsletter',
        ]

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        # partial updates leave absent attributes untouched
        if self.is_bound:
            for name in list(self.fields):
                if name not in self.data:
                    del self.fields[name]

    def clean_newsletter(self):
        value = self.cleaned_data.get('newsletter')
        return self.instance.newsletter if value is None else value


class UpdatePasswordForm(forms.Form):
    current_password = forms.CharField(strip=False)
    password = forms.CharField(strip=False)
    password_confirmation = forms.CharField(strip=False)

    def __init__(self, *args, user=None, **kwargs):
        self.user = user
        super().__init__(*args, **kwargs)

    def clean_current_password(self):
        password = self.cleaned_data['current_password']
        if not self.user.check_password(password):
            raise ValidationError(_('The password is incorrect.'))
        return password

    def clean(self):
        cleaned = super().clean()
        check_password_confirmation(self)
        run_password_validators(self, self.user)
        return cleaned


class DeleteAccountForm(forms.Form):
    password = forms.CharField(strip=False)

    def __init__(self, *args, user=None, **kwargs):
        self.user = user
        super().__init__(*args, **kwargs)

    def clean_password(self):
        password = self.cleaned_data['password']
        if not self.user.check_password(password):
            raise ValidationError(_('The password is incorrect.'))
        return password


class CareerPageUpdateForm(forms.Form):
    career_page_enabled = OptionalBooleanField(required=False)
    career_page_slug = forms.CharField(
        max_length=255, required=False,
        validators=[RegexValidator(SLUG_RE, 'The career page slug may only contain letters, numbers, and hyphens.')],
    )
    career_page_image = forms.ImageField(required=False, error_messages={
        'invalid_image': 'The file must be an image.',
    })
    career_page_videos = ArrayField(required=False)
    career_page_domain = forms.CharField(
        max_length=255, required=False,
        validators=[RegexValidator(DOMAIN_RE, 'Please enter a valid domain name.')],
    )
    spontaneous_application_enabled = OptionalBooleanField(required=False)
    career_page_visibility = OptionalBooleanField(required=False)

    def __init__(self, *args, company=None, **kwargs):
        self.company = company
        super().__init__(*args, **kwargs)

    def _taken(self, field, value):
        return Company.objects.filter(**{field: value}).exclude(pk=self.company.pk).exists()

    def clean_career_page_slug(self):
        slug = self.cleaned_data.get('career_page_slug') or None
        if slug and self._taken('career_page_slug', slug):
            raise ValidationError('This career page slug is already taken.')
        return slug

    def clean_career_page_domain(self):
        domain = self.cleaned_data.get('career_page_domain') or None
        if domain and self._taken('career_page_domain', domain):
            raise ValidationError('This domain is already in use by another company.')
        return domain

    def clean_career_page_image(self):
        image = self.cleaned_data.get('career_page_image')
        if not image:
            return None
        return validate_image_rules(image, **CAREER_PAGE_IMAGE_RULES)

    def clean_career_page_videos(self):
        videos = self.cleaned_data.get('career_page_videos')
        if videos in (None, ''):
            return None
        if not isinstance(videos, list):
            raise ValidationError('The career page videos field must be an array.')
        if len(videos) > MAX_CAREER_PAGE_VIDEOS:
            raise ValidationError('You may not add more than 5 videos.')
        for video in videos:
            if not isinstance(video, (str, dict)):
                raise ValidationError('Each career page video must be a string.')
            if isinstance(video, str) and len(video) > 500:
                raise ValidationError('Each career page video may not be greater than 500 characters.')
        return videos


class CareerPageVideoForm(forms.Form):
    url = forms.URLField(max_length=500)
    title = forms.CharField(max_length=255, required=False)

    def clean_url(self):
        url = self.cleaned_data['url']
        if not YOUTUBE_URL_RE.match(url):
            raise ValidationError('The url field format is invalid.')
        return url
