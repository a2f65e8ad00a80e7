from django.apps import AppConfig

class AnalysesConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'rnseanomaly.analyses'
