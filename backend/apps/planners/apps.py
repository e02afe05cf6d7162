from django.apps import AppConfig


class PlannersConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.planners'
    verbose_name = 'Planner couples and shared vendors'
