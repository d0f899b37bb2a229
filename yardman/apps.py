"""Django app configuration for Yardman."""

from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class YardmanConfig(AppConfig):
    """Configuration for Yardman app."""

    name = "yardman"
    verbose_name = _("Cut Goods Inventory")
