"""
Custom authentication backends.

``MultiFieldAuthBackend``
    Web/API login using any one of ``username``, ``national_id``,
    ``phone_number``, or ``email`` together with the account password.

``QuickPinBackend``
    USSD login using the gateway-reported phone number bound to the
    officer (``ussd_phone_number``) and the 4-digit Quick PIN.

Both are registered in ``settings.AUTHENTICATION_BACKENDS`` so that
Django's ``authenticate()`` call dispatches on the keyword arguments
supplied; each backend returns ``None`` for credentials it does not own.
"""

from __future__ import annotations

from django.contrib.auth import get_user_model
from django.contrib.auth.backends import ModelBackend
from django.contrib.auth.hashers import make_password
from django.db.models import Q

User = get_user_model()


class MultiFieldAuthBackend(ModelBackend):
    """
    Authenticate against username, national_id, phone_number, or email.
    """

    def authenticate(self, request, identifier=None, password=None, **kwargs):
        """
        Resolve the user by *identifier* and verify *password*.

        Returns
        -------
        User | None
            The authenticated user, or ``None`` on failure.
        """
        if identifier is None or password is None:
            return None

        try:
            user = User.objects.get(
                Q(username=identifier)
                | Q(national_id=identifier)
                | Q(phone_number=identifier)
                | Q(email=identifier)
            )
        except User.DoesNotExist:
            # Run the default password hasher to mitigate timing attacks
            User().set_password(password)
            return None
        except User.MultipleObjectsReturned:
            return None

        if user.check_password(password) and self.user_can_authenticate(user):
            return user
        return None


class QuickPinBackend(ModelBackend):
    """
    Authenticate a USSD caller by bound phone number + Quick PIN.

    Called as ``authenticate(request, ussd_phone_number=..., password=pin)``.
    The PIN travels in ``password`` so Django's failed-login signal
    cleanses it like any other credential.

    Unknown numbers, disabled USSD access, inactive accounts and wrong
    PINs all produce the same ``None``; callers must not be able to tell
    them apart.
    """

    def authenticate(self, request, ussd_phone_number=None, password=None, **kwargs):
        if ussd_phone_number is None or password is None:
            return None

        user = (
            User.objects
            .select_related("station")
            .filter(ussd_phone_number=ussd_phone_number)
            .first()
        )
        if user is None or not user.ussd_quick_pin_hash:
            # Hash anyway so a miss costs as much as a wrong PIN
            make_password(password)
            return None

        if not user.check_quick_pin(password):
            return None
        if not (user.ussd_enabled and self.user_can_authenticate(user)):
            return None
        return user
