from django.apps import AppConfig


class MatchingConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.matching'
    verbose_name = 'Discovery & moderation'

    trust_graph = None

    def ready(self):
        """
        Build the notifier and the trust graph once per process.
        """
        from django.conf import settings
        from apps.users.notifications import build_notifier
        from apps.matching.services import TrustGraph

        self.trust_graph = TrustGraph(build_notifier(settings))


def get_trust_graph():
    from django.apps import apps
    return apps.get_app_config('matching').trust_graph
