# jobs/enums.py
from django.db import models


class JobStatus(models.TextChoices):
    DRAFT = 'draft', 'Draft'
    PENDING = 'pending', 'Pending'
    PUBLISHED = 'published', 'Published'
    EXPIRED = 'expired', 'Expired'
    CLOSED = 'closed', 'Closed'


class ApplicationProcess(models.TextChoices):
    EMAIL = 'email', 'Email'
    URL = 'url', 'URL'
    BOTH = 'both', 'Email & URL'


class EmploymentType(models.TextChoices):
    FULL_TIME = 'full-time', 'Full time'
    PART_TIME = 'part-time', 'Part time'
    FULL_PART_TIME = 'full-part-time', 'Full/Part time'
    CONTRACT = 'contract', 'Contract'
    TEMPORARY = 'temporary', 'Temporary'
    INTERNSHIP = 'internship', 'Internship'
    VOLUNTEER = 'volunteer', 'Volunteer'
    # types offered by the listing wizard
    PERMANENT = 'permanent', 'Permanent'
    FREELANCE = 'freelance', 'Freelance'
    SIDE_JOB = 'side-job', 'Side job'
    APPRENTICESHIP = 'apprenticeship', 'Apprenticeship'
    WORKING_STUDENT = 'working-student', 'Working student'
    INTERIM = 'interim', 'Interim'


class ExperienceLevel(models.TextChoices):
    ENTRY = 'entry', 'Entry Level'
    JUNIOR = 'junior', 'Junior'
    MID_LEVEL = 'mid-level', 'Mid-Level'
    PROFESSIONAL = 'professional', 'Professional'
    SENIOR = 'senior', 'Senior'
    EXECUTIVE = 'executive', 'Executive'


class Workplace(models.TextChoices):
    REMOTE = 'remote', 'Remote'
    ONSITE = 'onsite', 'Onsite'
    HYBRID = 'hybrid', 'Hybrid'


class SalaryType(models.TextChoices):
    HOURLY = 'hourly', 'Hourly'
    DAILY = 'daily', 'Daily'
    MONTHLY = 'monthly', 'Monthly'
    YEARLY = 'yearly', 'Yearly'


class SalaryOption(models.TextChoices):
    FIXED = 'fixed', 'Fixed'
    RANGE = 'range', 'Range'
    NEGOTIABLE = 'negotiable', 'Negotiable'


class ApplicationStatus(models.TextChoices):
    NEW = 'new', 'New'
    PENDING = 'pending', 'Pending'
    REVIEWING = 'reviewing', 'Reviewing'
    SHORTLISTED = 'shortlisted', 'Shortlisted'
    INTERVIEWING = 'interviewing', 'Interviewing'
    OFFERED = 'offered', 'Offered'
    HIRED = 'hired', 'Hired'
    REJECTED = 'rejected', 'Rejected'


class PaymentStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    COMPLETED = 'completed', 'Completed'
    FAILED = 'failed', 'Failed'
    REFUNDED = 'refunded', 'Refunded'


class JobCategory(models.TextChoices):
    SOFTWARE_ENGINEERING = 'software_engineering', 'Software Engineering/Development'
    DEVOPS = 'devops', 'DevOps & Site Reliability Engineering'
    DATA_SCIENCE = 'data_science', 'Data Science & Analytics'
    CYBERSECURITY = 'cybersecurity', 'Cybersecurity & Information Security'
    CLOUD_COMPUTING = 'cloud_computing', 'Cloud Computing & Infrastructure'
    NETWORK_ENGINEERING = 'network_engineering', 'Network Engineering'
    SYSTEM_ADMINISTRATION = 'system_administration', 'System Administration'
    DATABASE_ADMINISTRATION = 'database_administration', 'Database Administration & Engineering'
    IT_SUPPORT = 'it_support', 'IT Support & Help Desk'
    UIUX_DESIGN = 'uiux_design', 'UI/UX Design'
    PRODUCT_MANAGEMENT = 'product_management', 'Product Management'
    QA_TESTING = 'qa_testing', 'QA & Testing'
    MACHINE_LEARNING_AI = 'machine_learning_ai', 'Machine Learning & AI'
    MOBILE_DEVELOPMENT = 'mobile_development', 'Mobile Development'
    WEB_DEVELOPMENT = 'web_development', 'Web Development'
    IT_PROJECT_MANAGEMENT = 'it_project_management', 'IT Project Management'
    IT_ARCHITECTURE = 'it_architecture', 'IT Architecture'
    EMBEDDED_SYSTEMS_IOT = 'embedded_systems_iot', 'Embedded Systems & IoT'
    BLOCKCHAIN_CRYPTO = 'blockchain_crypto', 'Blockchain & Cryptocurrency'
    GAME_DEVELOPMENT = 'game_development', 'Game Development'

    @classmethod
    def options(cls):
        return {member.value: member.label for member in cls}


# -------------------------
# Swiss geography
# -------------------------
class SwissRegion(models.TextChoices):
    ZENTRALSCHWEIZ = 'central', 'Zentralschweiz'
    OSTSCHWEIZ = 'eastern', 'Ostschweiz'
    ZURICH = 'zurich', 'Zürich'
    NORDWESTSCHWEIZ = 'northwest', 'Nordwestschweiz'
    ESPACE_MITTELLAND = 'espace_mittelland', 'Espace Mittelland'
    REGION_LEMANIQUE = 'region_lemanique', 'Région lémanique'
    TICINO = 'ticino', 'Ticino'

    @property
    def cantons(self):
        return [SwissCanton(code) for code in REGION_CANTONS[self.value]]

    @property
    def canton_codes(self):
        return [canton.value for canton in self.cantons]


class SwissCanton(models.TextChoices):
    ZURICH = 'ZH', 'Zürich'
    BERN = 'BE', 'Bern'
    LUCERNE = 'LU', 'Luzern'
    URI = 'UR', 'Uri'
    SCHWYZ = 'SZ', 'Schwyz'
    OBWALDEN = 'OW', 'Obwalden'
    NIDWALDEN = 'NW', 'Nidwalden'
    GLARUS = 'GL', 'Glarus'
    ZUG = 'ZG', 'Zug'
    FRIBOURG = 'FR', 'Fribourg'
    SOLOTHURN = 'SO', 'Solothurn'
    BASEL_STADT = 'BS', 'Basel-Stadt'
    BASEL_LANDSCHAFT = 'BL', 'Basel-Landschaft'
    SCHAFFHAUSEN = 'SH', 'Schaffhausen'
    APPENZELL_AUSSERRHODEN = 'AR', 'Appenzell Ausserrhoden'
    APPENZELL_INNERRHODEN = 'AI', 'Appenzell Innerrhoden'
    ST_GALLEN = 'SG', 'St. Gallen'
    GRAUBUNDEN = 'GR', 'Graubünden'
    AARGAU = 'AG', 'Aargau'
    THURGAU = 'TG', 'Thurgau'
    TICINO = 'TI', 'Ticino'
    VAUD = 'VD', 'Vaud'
    VALAIS = 'VS', 'Valais'
    NEUCHATEL = 'NE', 'Neuchâtel'
    GENEVA = 'GE', 'Genève'
    JURA = 'JU', 'Jura'
    LIECHTENSTEIN = 'FL', 'Fürstentum Liechtenstein'

    @property
    def region(self):
        return SwissRegion(CANTON_REGIONS[self.value])


class SwissSubRegion(models.TextChoices):
    ZURICH_CITY = 'zurich_city', 'Stadt Zürich'
    ZURICH_OBERLAND = 'zurich_oberland', 'Zürcher Oberland'
    ZURICH_UNTERLAND = 'zurich_unterland', 'Zürcher Unterland'
    WINTERTHUR = 'winterthur', 'Winterthur'
    SCHAFFHAUSEN = 'schaffhausen', 'Schaffhausen'
    WIL_TOGGENBURG = 'wil_toggenburg', 'Wil/Toggenburg'
    THURGAU_BODENSEE = 'thurgau_bodensee', 'Thurgau/Bodensee'
    ST_GALLEN_APPENZELL = 'st_gallen_appenzell', 'St. Gallen/Appenzell'
    RHEINTAL_FL_SARGANS_LINTH = 'rheintal_fl_sargans_linth', 'Rheintal/FL/Sargans/Linth'
    GRAUBUNDEN = 'graubunden', 'Graubünden'
    AARGAU_SOLOTHURN = 'aargau_solothurn', 'Aargau/Solothurn'
    BASEL = 'basel', 'Basel'
    GENF = 'genf', 'Genf'
    NEUCHATEL_JURA = 'neuchatel_jura', 'Neuchatel/Jura'
    FRIBOURG = 'fribourg', 'Fribourg'
    WAADT_UNTERWALLIS = 'waadt_unterwallis', 'Waadt/Unterwallis'
    TESSIN = 'tessin', 'Tessin'
    ZENTRALSCHWEIZ = 'zentralschweiz', 'Zentralschweiz'
    BERN = 'bern', 'Bern'

    @property
    def region(self):
        return SwissRegion(SUB_REGION_REGIONS[self.value])

    @property
    def postal_codes(self):
        return POSTAL_CODES.get(self.value, [])

    @classmethod
    def for_region(cls, region):
        return [sub_region for sub_region in cls if sub_region.region == SwissRegion(region)]

    @classmethod
    def for_canton(cls, canton):
        return [cls(value) for value in CANTON_SUB_REGIONS[SwissCanton(canton).value]]

    @classmethod
    def detect_from_postal_code(cls, postal_code):
        """Only the Zürich sub-regions carry postal codes; everything else yields None."""
        postal_code = str(postal_code or '').strip()
        for sub_region in cls:
            if postal_code in sub_region.postal_codes:
                return sub_region
        return None


CANTON_REGIONS = {
    'ZH': 'zurich',
    'BE': 'espace_mittelland', 'FR': 'espace_mittelland', 'SO': 'espace_mittelland',
    'NE': 'espace_mittelland', 'JU': 'espace_mittelland',
    'LU': 'central', 'UR': 'central', 'SZ': 'central', 'OW': 'central', 'NW': 'central', 'ZG': 'central',
    'GL': 'eastern', 'SH': 'eastern', 'AR': 'eastern', 'AI': 'eastern', 'SG': 'eastern',
    'GR': 'eastern', 'TG': 'eastern', 'FL': 'eastern',
    'BS': 'northwest', 'BL': 'northwest', 'AG': 'northwest',
    'VD': 'region_lemanique', 'VS': 'region_lemanique', 'GE': 'region_lemanique',
    'TI': 'ticino',
}

# Liechtenstein belongs to the eastern region but is not listed as one of its cantons
REGION_CANTONS = {
    'central': ['LU', 'UR', 'SZ', 'OW', 'NW', 'ZG'],
    'eastern': ['GL', 'SH', 'AR', 'AI', 'SG', 'GR', 'TG'],
    'zurich': ['ZH'],
    'northwest': ['BS', 'BL', 'AG'],
    'espace_mittelland': ['BE', 'FR', 'SO', 'NE', 'JU'],
    'region_lemanique': ['VD', 'VS', 'GE'],
    'ticino': ['TI'],
}

SUB_REGION_REGIONS = {
    'zurich_city': 'zurich',
    'zurich_oberland': 'zurich',
    'zurich_unterland': 'zurich',
    'winterthur': 'zurich',
    'schaffhausen': 'eastern',
    'wil_toggenburg': 'eastern',
    'thurgau_bodensee': 'eastern',
    'st_gallen_appenzell': 'eastern',
    'rheintal_fl_sargans_linth': 'eastern',
    'graubunden': 'eastern',
    'aargau_solothurn': 'northwest',
    'basel': 'northwest',
    'genf': 'region_lemanique',
    'neuchatel_jura': 'espace_mittelland',
    'fribourg': 'espace_mittelland',
    'waadt_unterwallis': 'region_lemanique',
    'tessin': 'ticino',
    'zentralschweiz': 'central',
    'bern': 'espace_mittelland',
}

CANTON_SUB_REGIONS = {
    'ZH': ['zurich_city', 'zurich_oberland', 'zurich_unterland', 'winterthur'],
    'SH': ['schaffhausen'],
    'TG': ['thurgau_bodensee'],
    'SG': ['st_gallen_appenzell', 'wil_toggenburg', 'rheintal_fl_sargans_linth'],
    'AR': ['st_gallen_appenzell'],
    'AI': ['st_gallen_appenzell'],
    'GL': ['rheintal_fl_sargans_linth'],
    'GR': ['graubunden'],
    'FL': ['rheintal_fl_sargans_linth'],
    'AG': ['aargau_solothurn'],
    'SO': ['aargau_solothurn'],
    'BS': ['basel'],
    'BL': ['basel'],
    'GE': ['genf'],
    'NE': ['neuchatel_jura'],
    'JU': ['neuchatel_jura'],
    'FR': ['fribourg'],
    'VD': ['waadt_unterwallis'],
    'VS': ['waadt_unterwallis'],
    'TI': ['tessin'],
    'BE': ['bern'],
    'LU': ['zentralschweiz'], 'UR': ['zentralschweiz'], 'SZ': ['zentralschweiz'],
    'OW': ['zentralschweiz'], 'NW': ['zentralschweiz'], 'ZG': ['zentralschweiz'],
}

# sample data: only the Zürich sub-regions are mapped so far
POSTAL_CODES = {
    'zurich_city': [
        '8000', '8001', '8002', '8003', '8004', '8005', '8006', '8008', '8037', '8038', '8041', '8044',
        '8045', '8046', '8047', '8048', '8049', '8050', '8051', '8052', '8053', '8055', '8057',
    ],
    'zurich_oberland': [
        '8132', '8133', '8134', '8135', '8344', '8345', '8607', '8610', '8614', '8615', '8617', '8618',
        '8620', '8625', '8626', '8627', '8635', '8636', '8637',
    ],
    'zurich_unterland': [
        '8302', '8303', '8304', '8305', '8306', '8307', '8309', '8310', '8311', '8315', '8317', '8320',
        '8322', '8424', '8425', '8426', '8427',
    ],
    'winterthur': [
        '8400', '8401', '8402', '8403', '8404', '8405', '8406', '8408', '8409', '8412', '8413', '8414',
        '8415',
    ],
}
