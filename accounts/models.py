# accounts/models.py
from django.contrib.auth.models import AbstractUser
from django.conf import settings
from django.db import models


class User(AbstractUser):
    class Role(models.TextChoices):
        OWNER = "OWNER", "Proprietário"
        MECHANIC = "MECHANIC", "Mecânico"
        ADMIN = "ADMIN", "Administrador"

    email = models.EmailField("E-mail", unique=True)
    phone = models.CharField("Telefone", max_length=20, blank=True)
    role = models.CharField("Papel", max_length=10, choices=Role.choices, default=Role.OWNER)

    def save(self, *args, **kwargs):
        if self.email:
            self.email = self.email.strip().lower()
        super().save(*args, **kwargs)


class UserProfile(models.Model):
    """
    Perfil estendido com a identidade legal do usuário.

    `document_number` e `city` precisam estar preenchidos para que o usuário
    participe de um traspasso (como vendedor ou comprador).
    """

    class DocumentType(models.TextChoices):
        CC = "CC", "Cédula de cidadania"
        CE = "CE", "Cédula de estrangeiro"
        TI = "TI", "Cartão de identidade"
        PASSPORT = "PASSPORT", "Passaporte"
        NIT = "NIT", "NIT"

    user = models.OneToOneField(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="profile")
    document_type = models.CharField("Tipo de documento", max_length=10, choices=DocumentType.choices, default=DocumentType.CC)
    document_number = models.CharField("Número do documento", max_length=30, unique=True, null=True, blank=True)
    address = models.CharField("Endereço", max_length=200, blank=True)
    city = models.CharField("Cidade", max_length=80, null=True, blank=True)
    department = models.CharField("Departamento", max_length=80, default="Cauca")
    country = models.CharField("País", max_length=60, default="Colombia")
    birth_date = models.DateField("Data de nascimento", null=True, blank=True)
    emergency_contact = models.CharField("Contato de emergência", max_length=120, blank=True)
    emergency_phone = models.CharField("Telefone de emergência", max_length=20, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Perfil"
        verbose_name_plural = "Perfis"

    def __str__(self):
        return f"Perfil de {self.user.email}"

    @property
    def is_complete(self) -> bool:
        from .profiles import is_profile_complete

        return is_profile_complete(self)
