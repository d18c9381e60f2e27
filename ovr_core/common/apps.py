from django.apps import AppConfig
from django.db.models.signals import post_migrate


class CommonConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "ovr_core.common"
    label = "common"

    def ready(self):
        from ovr_core.common.seed import seed_on_migrate

        # common is installed first, but post_migrate only fires once every
        # app's migrations have run.
        post_migrate.connect(seed_on_migrate, sender=self, dispatch_uid="ovr_seed_reference_data")
