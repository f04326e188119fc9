"""Choice enums for pricing app."""

from django.db import models


class ProjectType(models.TextChoices):
    RESIDENCIAL = "residencial", "Residencial"
    DESARROLLO = "desarrollo", "Desarrollo / vertical"
    INTERNO = "interno", "Interno"


# Project type codes used by quotations -> margin configuration label
PROJECT_TYPE_CODES = {
    "1": ProjectType.RESIDENCIAL,
    "2": ProjectType.INTERNO,
    "3": ProjectType.DESARROLLO,
}


def resolve_project_type(project_type) -> str | None:
    """
    Map a quotation project type ("1", 3, "residencial") to a margin label.
    Returns None when the project type is unknown.
    """
    if project_type is None:
        return None
    key = str(project_type).strip()
    if key in PROJECT_TYPE_CODES:
        return PROJECT_TYPE_CODES[key].value
    if key in ProjectType.values:
        return key
    return None
