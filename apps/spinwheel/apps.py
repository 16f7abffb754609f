from django.apps import AppConfig


class SpinwheelConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.spinwheel'
    verbose_name = 'Spin Wheel'
