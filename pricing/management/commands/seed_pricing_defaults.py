"""
Create the margin configuration of a project type and, optionally, the
installation flags of accessories. Rates are taken from the command line;
existing rows are left untouched. Accessory costs are never written here:
a missing catalog cost keeps falling back to the logged default.
"""
from decimal import Decimal, InvalidOperation

from django.core.exceptions import ValidationError
from django.core.management.base import BaseCommand, CommandError

from catalog.models import AccessoryInstallation
from pricing.choices import resolve_project_type
from pricing.lookups import clear_cache
from pricing.models import MarginConfig

RATE_OPTIONS = ("material_margin", "accessory_margin", "fixed_overhead_rate", "sale_margin")


def _rate(value):
    try:
        return Decimal(value)
    except InvalidOperation:
        raise CommandError(f"Invalid rate: {value!r}")


class Command(BaseCommand):
    help = "Seed the margin configuration of a project type and accessory installation flags"

    def add_arguments(self, parser):
        parser.add_argument(
            "project_type",
            type=str,
            help="Project type code (1, 2, 3) or label (residencial, interno, desarrollo)",
        )
        for option in RATE_OPTIONS:
            parser.add_argument(
                f"--{option.replace('_', '-')}",
                dest=option,
                type=str,
                required=True,
                help="Rate as a fraction, e.g. 0.15",
            )
        parser.add_argument(
            "--requires-installation",
            dest="requires_installation",
            action="append",
            default=[],
            metavar="ACCESSORY",
            help="Accessory name that carries fixed overhead (repeatable)",
        )

    def handle(self, *args, **options):
        label = resolve_project_type(options["project_type"])
        if label is None:
            raise CommandError(f"Unknown project type: {options['project_type']}")

        created = 0
        config = MarginConfig.objects.filter(project_type=label).first()
        if config is None:
            config = MarginConfig(
                project_type=label,
                **{option: _rate(options[option]) for option in RATE_OPTIONS},
            )
            try:
                config.full_clean()
            except ValidationError as exc:
                raise CommandError(f"Invalid margin configuration: {exc.message_dict}")
            config.save()
            created += 1
        else:
            self.stdout.write(f"Margin configuration for {label} already exists, left unchanged.")

        for name in options["requires_installation"]:
            _, was_created = AccessoryInstallation.objects.get_or_create(
                name=name.strip(),
                defaults={"requires_installation": True},
            )
            created += was_created

        clear_cache()
        self.stdout.write(self.style.SUCCESS(f"Seeded pricing defaults ({created} rows created)."))
