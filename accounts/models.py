from django.contrib.auth.models import AbstractUser


class User(AbstractUser):
    """
    Student account. Progress, review logs and study sessions hang off it
    and are removed with it.
    """

    pass
