# ovr_core/common/management/commands/seed_reference_data.py

from django.core.management.base import BaseCommand

from ovr_core.common.seed import seed_reference_data


class Command(BaseCommand):
    help = "Seed facilities, incident categories and the bootstrap admin (idempotent)."

    def add_arguments(self, parser):
        parser.add_argument("--admin-email", default=None, help="Overrides OVR_DEFAULT_ADMIN_EMAIL.")
        parser.add_argument("--admin-password", default=None, help="Overrides OVR_DEFAULT_ADMIN_PASSWORD.")

    def handle(self, *args, **options):
        result = seed_reference_data(
            admin_email=options["admin_email"],
            admin_password=options["admin_password"],
        )
        self.stdout.write(
            self.style.SUCCESS(
                f"Reference data ensured. Facilities created: {result['facilities']}, "
                f"categories created: {result['categories']}, "
                f"admin created: {'yes' if result['admin_created'] else 'no'}"
            )
        )
