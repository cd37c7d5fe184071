"""
PATH: users/models/user.py

CUSTOM USER MODEL

Storefront identity:
- email is the login identifier.
- role is "user" for shoppers, "admin" for back office.
- address + payment_method are the saved checkout profile read by order assembly.

Name placeholder:
- Accounts created without a name get "NO_NAME"; the session-claims builder derives
  a display name from the email on first sign-in.
"""

from __future__ import annotations

import uuid

from django.contrib.auth.models import AbstractBaseUser, BaseUserManager, PermissionsMixin
from django.core.exceptions import ValidationError
from django.db import models

NO_NAME = "NO_NAME"

ROLE_ADMIN = "admin"
ROLE_USER = "user"

PAYMENT_METHOD_PAYPAL = "PayPal"
PAYMENT_METHOD_STRIPE = "Stripe"
PAYMENT_METHOD_COD = "CashOnDelivery"

PAYMENT_METHODS = [PAYMENT_METHOD_PAYPAL, PAYMENT_METHOD_STRIPE, PAYMENT_METHOD_COD]


# ---------------- USER MANAGER ----------------
class UserManager(BaseUserManager):
    def create_user(self, email=None, password=None, **extra_fields):
        email = (email or "").strip()
        if not email:
            raise ValueError("An email address is required")

        email = self.normalize_email(email)
        extra_fields.setdefault("is_active", True)
        extra_fields.setdefault("name", NO_NAME)

        user = self.model(email=email, **extra_fields)

        if password:
            user.set_password(password)
        else:
            user.set_unusable_password()

        user.full_clean(exclude=["password"])
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        if not password:
            raise ValueError("Superuser must have a password")

        extra_fields.setdefault("role", ROLE_ADMIN)
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)

        if extra_fields.get("is_staff") is not True:
            raise ValueError("Superuser must have is_staff=True")
        if extra_fields.get("is_superuser") is not True:
            raise ValueError("Superuser must have is_superuser=True")

        return self.create_user(email=email, password=password, **extra_fields)


# ---------------- USER MODEL ----------------
class User(AbstractBaseUser, PermissionsMixin):
    ROLE_CHOICES = [
        (ROLE_ADMIN, "Admin"),
        (ROLE_USER, "User"),
    ]

    PAYMENT_METHOD_CHOICES = [(m, m) for m in PAYMENT_METHODS]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    email = models.EmailField(unique=True)
    name = models.CharField(max_length=150, default=NO_NAME)

    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default=ROLE_USER)

    # Checkout profile (snapshotted into orders, never referenced live)
    address = models.JSONField(null=True, blank=True)
    payment_method = models.CharField(
        max_length=32,
        choices=PAYMENT_METHOD_CHOICES,
        blank=True,
        default="",
    )

    is_active = models.BooleanField(default=True)
    is_staff = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = UserManager()

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = []

    class Meta:
        ordering = ["-created_at"]

    def clean(self):
        if self.email:
            self.email = self.__class__.objects.normalize_email(self.email).strip()
        if not self.email:
            raise ValidationError("User must have an email")
        self.name = (self.name or "").strip() or NO_NAME

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN

    def __str__(self):
        return f"{self.email} ({self.role})"
