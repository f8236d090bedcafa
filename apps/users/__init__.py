"""Users app package.

Email-login accounts for café customers and staff. Use
``apps.users.models.CustomUser`` as the AUTH_USER_MODEL throughout the
project and ``apps.users.context.UserContext`` wherever domain code needs
to know who is acting.
"""
