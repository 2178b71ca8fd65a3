from django.contrib.admin.apps import AdminConfig


class AwardsAdminConfig(AdminConfig):
    default_site = 'core.sites.AwardsAdminSite'
