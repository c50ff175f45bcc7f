# jobs/forms.py
from django import forms
from django.core.exceptions import ValidationError
from django.core.validators import EmailValidator, FileExtensionValidator

from accounts.models import Company
from jobboard.forms import ArrayField, RequiredBooleanField

from .enums import (
    ApplicationProcess, EmploymentType, JobCategory, JobStatus, SalaryType, Workplace,
)
from .models import JobTier

SENIORITY_LEVELS = ('no_experience', 'junior', 'mid_level', 'professional', 'senior', 'lead')
SALARY_PERIODS = ('hourly', 'daily', 'weekly', 'monthly', 'yearly')
APPLICATION_LANGUAGES = ('english', 'german', 'french', 'italian')

# custom create form: free-form employment types collapse onto the base enum
CUSTOM_EMPLOYMENT_TYPES = {
    'employee': EmploymentType.FULL_TIME,
    'interim': EmploymentType.TEMPORARY,
    'apprenticeship': EmploymentType.INTERNSHIP,
    'internship': EmploymentType.INTERNSHIP,
    'working_student': EmploymentType.PART_TIME,
    'traineeship': EmploymentType.INTERNSHIP,
    'side_job': EmploymentType.PART_TIME,
    'freelance': EmploymentType.CONTRACT,
}

WIZARD_EMPLOYMENT_TYPES = {
    'permanent': EmploymentType.PERMANENT,
    'temporary': EmploymentType.TEMPORARY,
    'freelance': EmploymentType.FREELANCE,
    'internship': EmploymentType.INTERNSHIP,
    'side-job': EmploymentType.SIDE_JOB,
    'apprenticeship': EmploymentType.APPRENTICESHIP,
    'working-student': EmploymentType.WORKING_STUDENT,
    'interim': EmploymentType.INTERIM,
}

SALARY_PERIOD_TYPES = {
    'hourly': SalaryType.HOURLY,
    'daily': SalaryType.DAILY,
    'weekly': SalaryType.MONTHLY,  # no weekly salary type
    'monthly': SalaryType.MONTHLY,
    'yearly': SalaryType.YEARLY,
}

DOCUMENT_REQUIREMENTS = ('required', 'optional', 'hidden')
QUESTION_REQUIREMENTS = ('optional', 'required', 'knockout')
ANSWER_TYPES = ('yes/no', 'single-choice', 'multiple-choice', 'date', 'number', 'file-upload', 'short-text')

APPLICATION_DOCUMENT_EXTENSIONS = ['pdf', 'doc', 'docx']
APPLICATION_DOCUMENT_MAX_BYTES = 5 * 1024 * 1024


def _choices(values):
    return [(value, value) for value in values]


def clean_application_documents(documents):
    if documents in (None, '', []):
        return None
    if not isinstance(documents, dict):
        raise ValidationError('The application documents field must be an array.')
    cv = documents.get('cv')
    if cv is not None and cv not in DOCUMENT_REQUIREMENTS:
        raise ValidationError('The selected application documents.cv is invalid.')
    cover_letter = documents.get('cover_letter')
    if cover_letter is None:
        raise ValidationError('The application documents.cover letter field is required when application documents is present.')
    if cover_letter not in DOCUMENT_REQUIREMENTS:
        raise ValidationError('The selected application documents.cover letter is invalid.')
    return documents


def clean_screening_questions(questions):
    if questions in (None, ''):
        return None
    if not isinstance(questions, list):
        raise ValidationError('The screening questions field must be an array.')
    for index, question in enumerate(questions):
        if not isinstance(question, dict):
            raise ValidationError(f'The screening questions.{index} field must be an array.')
        for key in ('id', 'text', 'requirement', 'answerType'):
            if not isinstance(question.get(key), str) or not question.get(key):
                raise ValidationError(f'The screening questions.{index}.{key} field is required.')
        if question['requirement'] not in QUESTION_REQUIREMENTS:
            raise ValidationError(f'The selected screening questions.{index}.requirement is invalid.')
        if question['answerType'] not in ANSWER_TYPES:
            raise ValidationError(f'The selected screening questions.{index}.answerType is invalid.')
        choices = question.get('choices')
        if choices is not None and (
            not isinstance(choices, list) or not all(isinstance(choice, str) for choice in choices)
        ):
            raise ValidationError(f'The screening questions.{index}.choices field must be a list of strings.')
    return questions


class RangeValidationMixin:
    """``<field>_max`` must not be below ``<field>_min`` when both are given."""
    ranges = ()

    def clean(self):
        cleaned = super().clean()
        for name in self.ranges:
            low = cleaned.get(f'{name}_min')
            high = cleaned.get(f'{name}_max')
            if low is not None and high is not None and high < low:
                self.add_error(
                    f'{name}_max',
                    f'The {name} max field must be greater than or equal to {name} min.',
                )
        return cleaned


class CreateJobListingCustomForm(RangeValidationMixin, forms.Form):
    ranges = ('salary', 'workload')

    company_id = forms.ModelChoiceField(queryset=Company.objects.all())
    title = forms.CharField(max_length=255)
    company_description = forms.CharField(required=False)
    description = forms.CharField()
    requirements = forms.CharField()
    benefits = forms.CharField(required=False)
    final_words = forms.CharField(required=False)

    workplace = forms.ChoiceField(choices=Workplace.choices)
    office_location = forms.CharField(max_length=255)
    workload_min = forms.IntegerField(min_value=0, max_value=100, required=False)
    workload_max = forms.IntegerField(min_value=0, max_value=100, required=False)

    application_language = forms.ChoiceField(choices=_choices(APPLICATION_LANGUAGES))
    category = forms.ChoiceField(choices=JobCategory.choices)
    employment_type = forms.ChoiceField(choices=_choices(CUSTOM_EMPLOYMENT_TYPES))
    seniority_level = forms.ChoiceField(choices=_choices(SENIORITY_LEVELS), required=False)

    salary_min = forms.DecimalField(min_value=0, required=False)
    salary_max = forms.DecimalField(min_value=0, required=False)
    salary_period = forms.ChoiceField(choices=_choices(SALARY_PERIODS), required=False)

    skills = forms.CharField(required=False)

    application_process = forms.ChoiceField(choices=ApplicationProcess.choices)
    status = forms.ChoiceField(choices=JobStatus.choices)

    def clean(self):
        cleaned = super().clean()
        if cleaned.get('employment_type'):
            cleaned['employment_type_mapped'] = CUSTOM_EMPLOYMENT_TYPES[cleaned['employment_type']].value
        if cleaned.get('salary_period'):
            cleaned['salary_type'] = SALARY_PERIOD_TYPES[cleaned['salary_period']].value
        return cleaned


class JobListingWizardForm(RangeValidationMixin, forms.Form):
    """Multi-step listing editor: create with a package, update, update with a package."""
    ranges = ('salary', 'workload')

    title = forms.CharField(max_length=255)
    workload_min = forms.IntegerField(min_value=0, max_value=100)
    workload_max = forms.IntegerField(min_value=0, max_value=100)
    description_and_requirements = forms.CharField(min_length=20, max_length=4000)
    benefits = forms.CharField(required=False)
    contact_person = forms.CharField(max_length=255, required=False)

    workplace = forms.ChoiceField(choices=Workplace.choices)
    office_location = forms.CharField(max_length=255)

    employment_type = forms.ChoiceField(choices=_choices(WIZARD_EMPLOYMENT_TYPES))
    seniority_level = forms.ChoiceField(choices=_choices(SENIORITY_LEVELS), required=False)
    categories = ArrayField(required=False)

    salary_min = forms.DecimalField(min_value=0, required=False)
    salary_max = forms.DecimalField(min_value=0, required=False)
    salary_period = forms.ChoiceField(choices=_choices(SALARY_PERIODS), required=False)

    skills = forms.CharField(required=False)

    application_documents = forms.JSONField(required=False)
    screening_questions = ArrayField(required=False)

    application_process = forms.ChoiceField(
        choices=ApplicationProcess.choices,
        error_messages={'required': 'Please select an application method.'},
    )
    application_email = forms.CharField(max_length=255, required=False)
    application_url = forms.CharField(max_length=255, required=False)

    status = forms.ChoiceField(choices=JobStatus.choices)
    selected_tier_id = forms.ModelChoiceField(queryset=JobTier.objects.all(), required=False)

    def clean_categories(self):
        categories = self.cleaned_data.get('categories')
        if categories in (None, ''):
            return None
        if not isinstance(categories, list) or any(value not in JobCategory.values for value in categories):
            raise ValidationError('The selected categories is invalid.')
        return categories

    def clean_application_documents(self):
        return clean_application_documents(self.cleaned_data.get('application_documents'))

    def clean_screening_questions(self):
        return clean_screening_questions(self.cleaned_data.get('screening_questions'))

    def clean(self):
        cleaned = super().clean()
        process = cleaned.get('application_process')

        if process in (ApplicationProcess.EMAIL, ApplicationProcess.BOTH):
            email = cleaned.get('application_email')
            if not email:
                self.add_error('application_email', 'Email address is required when email application method is selected.')
            else:
                try:
                    EmailValidator()(email)
                except ValidationError:
                    self.add_error('application_email', 'The application email field must be a valid email address.')

        if process in (ApplicationProcess.URL, ApplicationProcess.BOTH) and not cleaned.get('application_url'):
            self.add_error('application_url', 'Website URL is required when URL application method is selected.')

        if cleaned.get('employment_type'):
            cleaned['employment_type_mapped'] = WIZARD_EMPLOYMENT_TYPES[cleaned['employment_type']].value
        if cleaned.get('salary_period'):
            cleaned['salary_type'] = SALARY_PERIOD_TYPES[cleaned['salary_period']].value
        return cleaned


class ScreeningForm(forms.Form):
    application_documents = forms.JSONField(required=False)
    screening_questions = ArrayField(required=False)

    def clean_application_documents(self):
        documents = self.cleaned_data.get('application_documents')
        if documents not in (None, '') and not isinstance(documents, (dict, list)):
            raise ValidationError('The application documents field must be an array.')
        return documents or None

    def clean_screening_questions(self):
        questions = self.cleaned_data.get('screening_questions')
        if questions not in (None, '') and not isinstance(questions, (dict, list)):
            raise ValidationError('The screening questions field must be an array.')
        return questions or None


class ImageToggleForm(forms.Form):
    use_company_logo = RequiredBooleanField()
    use_company_banner = RequiredBooleanField()


class PublishForm(forms.Form):
    selected_tier_id = forms.ModelChoiceField(
        queryset=JobTier.objects.all(),
        error_messages={
            'required': 'The selected tier id field is required.',
            'invalid_choice': 'The selected selected tier id is invalid.',
        },
    )
    status = forms.CharField(required=False)


def _document_field(label, required):
    return forms.FileField(
        required=required,
        validators=[FileExtensionValidator(
            APPLICATION_DOCUMENT_EXTENSIONS,
            message=f'The {label} must be a file of type: pdf, doc, docx.',
        )],
        error_messages={'required': f'The {label} field is required.'},
    )


class JobApplicationForm(forms.Form):
    cv = _document_field('cv', required=True)
    cover_letter = _document_field('cover letter', required=False)

    def _check_size(self, name, label):
        upload = self.cleaned_data.get(name)
        if upload and upload.size > APPLICATION_DOCUMENT_MAX_BYTES:
            raise ValidationError(f'The {label} may not be greater than 5120 kilobytes.')
        return upload

    def clean_cv(self):
        return self._check_size('cv', 'cv')

    def clean_cover_letter(self):
        return self._check_size('cover_letter', 'cover letter')
