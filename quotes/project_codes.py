"""
Project and furniture piece codes.

Project code:   [TYPE]-[Y][MM]-[NNN]            RE-610-007
Vertical:       [TYPE]-[Y][MM]-[NNN]-[PROTO]    WN-610-002-B1
Furniture code: [PROJECT CODE]-[AREA]-[TYPE][-A|-G]

TYPE is RE for residential projects; vertical developments use WN / SY or the
first and last letter of the development name. Y is the last digit of the
year (codes are read back as 2020s).
"""
from datetime import date as date_cls

from pricing.choices import ProjectType, resolve_project_type

from .models import Quotation

RESIDENCIAL_PREFIX = "RE"
VERTICAL_PREFIXES = {"WN", "SY"}

AREAS = {
    "CLOSET": "CL",
    "DESPENSA": "DP",
    "LAVANDERIA": "LV",
    "VESTIDOR": "VD",
    "PUERTAS_INTERCOMUNICACION": "PI",
    "LIBRERO": "LB",
    "MUEBLE": "MB",
    "ESPECIALIDAD": "ES",
}

FURNITURE_TYPES = {
    "ALACENA": "ALC",
    "ALACENA_TIPON": "ALT",
    "ALACENA_ESQUINERA": "ALE",
    "ALACENA_ESQUINERA_TIPON": "AET",
    "GABINETE": "GAB",
    "GABINETE_ESQUINERO": "GAE",
    "PARRILLA": "PAR",
    "TARJA": "TAR",
    "DECORATIVO": "DEC",
    "HUACAL": "HUA",
    "LOCKER": "LOC",
    "LOCKER_TIPON": "LOT",
    "CLOSET": "CLO",
    "CAJONERA": "CAJ",
    "CAJON": "CJN",
    "CAJON_CON_VISTA": "CJV",
    "CAJON_INTERNO": "CJI",
    "CAJON_INTERNO_VISTA": "CIV",
    "CAJON_U": "CJU",
    "CAJON_U_CON_VISTA": "CUV",
    "VISTA": "VIS",
    "ENTREPANO": "ENT",
    "ZAPATERO": "ZAP",
    "REPISA_DOBLE_CFIJACION": "RDC",
    "REPISA_TRIPLE_CFIJACION": "RTC",
    "ACCESORIO": "ACC",
}

# A = additional order, G = warranty
PRODUCTION_TYPES = {"A", "G"}


def _type_prefix(project_type: str, vertical_project: str | None) -> str:
    if project_type == ProjectType.RESIDENCIAL:
        return RESIDENCIAL_PREFIX
    name = (vertical_project or "").strip().upper()
    if not name:
        raise ValueError("Vertical project name is required for vertical projects")
    if name in VERTICAL_PREFIXES:
        return name
    return name[0] + name[-1]


def _date_segment(on: date_cls) -> str:
    return f"{str(on.year)[-1]}{on.month:02d}"


def _normalize_project_type(project_type) -> str:
    if project_type == "vertical":
        return ProjectType.DESARROLLO
    label = resolve_project_type(project_type)
    if label not in (ProjectType.RESIDENCIAL, ProjectType.DESARROLLO):
        raise ValueError(f"Unsupported project type for code generation: {project_type!r}")
    return label


def code_prefix(project_type, on: date_cls, vertical_project: str | None = None) -> str:
    """'RE-610-' for a residential project in October 2026."""
    label = _normalize_project_type(project_type)
    return f"{_type_prefix(label, vertical_project)}-{_date_segment(on)}-"


def generate_project_code(
    project_type,
    on: date_cls,
    consecutive_number: int,
    vertical_project: str | None = None,
    prototype: str | None = None,
) -> str:
    label = _normalize_project_type(project_type)
    code = f"{code_prefix(label, on, vertical_project)}{consecutive_number:03d}"
    if label == ProjectType.DESARROLLO and prototype:
        code += f"-{prototype}"
    return code


def generate_furniture_code(
    project_code: str,
    area: str,
    furniture_type: str,
    production_type: str | None = None,
) -> str:
    if production_type and production_type not in PRODUCTION_TYPES:
        raise ValueError(f"Unknown production type: {production_type!r}")
    code = f"{project_code}-{area}-{furniture_type}"
    if production_type:
        code += f"-{production_type}"
    return code


def parse_project_code(code: str) -> dict:
    """
    Split a project code into its parts.
    Raises ValueError for codes that do not follow the format.
    """
    parts = (code or "").split("-")
    if len(parts) < 3:
        raise ValueError("Invalid project code format")
    type_prefix, date_segment, consecutive = parts[0], parts[1], parts[2]
    if len(date_segment) != 3 or not date_segment.isdigit():
        raise ValueError("Invalid project code date segment")
    month = int(date_segment[1:])
    if not 1 <= month <= 12:
        raise ValueError("Invalid project code month")
    result = {
        "type_prefix": type_prefix,
        "year": 2020 + int(date_segment[0]),
        "month": month,
        "consecutive": int(consecutive),
    }
    if len(parts) >= 4:
        result["prototype"] = parts[3]
    return result


def validate_project_code(code: str) -> bool:
    try:
        parse_project_code(code)
    except ValueError:
        return False
    return True


def _name_for(table: dict, abbreviation: str) -> str:
    for name, abbrev in table.items():
        if abbrev == abbreviation:
            return name.lower().replace("_", " ")
    return abbreviation


def get_area_name(abbreviation: str) -> str:
    return _name_for(AREAS, abbreviation)


def get_furniture_type_name(abbreviation: str) -> str:
    return _name_for(FURNITURE_TYPES, abbreviation)


def next_consecutive_number(project_type, on: date_cls, vertical_project: str | None = None) -> int:
    """Next consecutive number for the month, from the highest stored project code."""
    prefix = code_prefix(project_type, on, vertical_project)
    highest = 0
    for code in Quotation.objects.filter(project_code__startswith=prefix).values_list(
        "project_code", flat=True
    ):
        try:
            highest = max(highest, parse_project_code(code)["consecutive"])
        except ValueError:
            continue
    return highest + 1
