from django.contrib import admin


class AwardsAdminSite(admin.AdminSite):
    site_header = "British Trade Awards Administration"
    site_title = "Awards Portal"
    index_title = "Awards Management"

    def get_app_list(self, request, app_label=None):
        """
        Return the installed apps with the day-to-day ones first.
        """
        app_list = super().get_app_list(request, app_label)

        app_ordering = {
            'awards': 1,
            'organisations': 2,
            'entries': 3,
            'voting': 4,
            'core': 5,
        }

        def get_sort_key(app_dict):
            return app_ordering.get(app_dict['app_label'], 100)

        app_list.sort(key=get_sort_key)
        return app_list
