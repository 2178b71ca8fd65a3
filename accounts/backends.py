# accounts/backends.py
from django.contrib.auth import get_user_model
from django.contrib.auth.backends import ModelBackend

UserModel = get_user_model()


class AdminEmailBackend(ModelBackend):
    """
    Back-office sign-in. Administrators sign in with their email address;
    a plain username still works for the token endpoint and the Django admin form.

    ``is_unconfirmed`` tells the login view when the password was right but the
    account has not been activated, so it can answer 403 instead of 401.
    """

    def find_accounts(self, identifier):
        identifier = (identifier or '').strip()
        if not identifier:
            return []
        if '@' in identifier:
            accounts = list(UserModel.objects.filter(email__iexact=identifier).order_by('pk'))
            if accounts:
                return accounts
        return list(UserModel.objects.filter(username__iexact=identifier).order_by('pk'))

    def authenticate(self, request, username=None, password=None, email=None, **kwargs):
        identifier = email or username or kwargs.get(UserModel.USERNAME_FIELD)
        if not identifier or password is None:
            return None

        accounts = self.find_accounts(identifier)
        if not accounts:
            # Hash once anyway so unknown addresses take as long as known ones.
            UserModel().set_password(password)
            return None

        # Several accounts can share an address; the password picks between them.
        for user in accounts:
            if user.check_password(password) and self.user_can_authenticate(user):
                return user
        return None

    def is_unconfirmed(self, email, password):
        return any(
            not user.is_active and user.check_password(password)
            for user in self.find_accounts(email)
        )
