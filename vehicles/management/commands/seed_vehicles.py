# vehicles/management/commands/seed_vehicles.py
from django.core.management.base import BaseCommand
from django.db import transaction
from faker import Faker
import random
import string

from accounts.models import User, UserProfile
from vehicles.models import Vehicle

BRANDS = [
    ("Renault", ["Logan", "Sandero", "Duster", "Stepway"]),
    ("Chevrolet", ["Onix", "Tracker", "Spark", "Captiva"]),
    ("Mazda", ["2", "3", "CX-3", "CX-30"]),
    ("Kia", ["Picanto", "Rio", "Sportage", "Soluto"]),
    ("Toyota", ["Corolla", "Yaris", "Hilux", "Fortuner"]),
    ("Nissan", ["March", "Versa", "Kicks", "Frontier"]),
    ("Suzuki", ["Swift", "Vitara", "S-Presso", "Jimny"]),
]

COLORS = ["preto", "branco", "prata", "cinza", "azul", "vermelho"]
CITIES = ["Popayán", "Cali", "Bogotá", "Medellín", "Pasto"]

# VIN real não usa I, O, Q. Vamos gerar 17 chars sem esses.
_VIN_CHARS = "ABCDEFGHJKLMNPRSTUVWXYZ0123456789"

def unique_vin():
    return "".join(random.choices(_VIN_CHARS, k=17))

def unique_plate():
    # padrão colombiano: três letras e três números
    return "".join(random.choices(string.ascii_uppercase, k=3)) + "".join(random.choices(string.digits, k=3))

class Command(BaseCommand):
    help = "Popula o banco com um administrador, proprietários com perfil completo e veículos fake."

    def add_arguments(self, parser):
        parser.add_argument("--min", "--n", dest="n", type=int, default=20,
                            help="Quantidade de veículos a criar (alias: --min, --n)")
        parser.add_argument("--owners", dest="owners", type=int, default=5,
                            help="Quantidade de proprietários a criar")
        parser.add_argument("--password", dest="password", default="carid123",
                            help="Senha usada em todos os usuários criados")

    def _create_owner(self, fake, password):
        email = fake.unique.email().lower()
        user = User.objects.create_user(
            username=email,
            email=email,
            password=password,
            first_name=fake.first_name(),
            last_name=fake.last_name(),
            phone=fake.phone_number()[:20],
            role=User.Role.OWNER,
        )
        UserProfile.objects.create(
            user=user,
            document_type=UserProfile.DocumentType.CC,
            document_number=str(fake.unique.random_number(digits=10, fix_len=True)),
            address=fake.street_address(),
            city=random.choice(CITIES),
            birth_date=fake.date_of_birth(minimum_age=18, maximum_age=80),
        )
        return user

    @transaction.atomic
    def handle(self, *args, **options):
        fake = Faker("es_CO")
        target = options["n"]
        password = options["password"]

        admin, admin_created = User.objects.get_or_create(
            username="admin",
            defaults={"email": "admin@carid.local", "role": User.Role.ADMIN, "is_staff": True, "is_superuser": True},
        )
        if admin_created:
            admin.set_password(password)
            admin.save()

        owners = [self._create_owner(fake, password) for _ in range(max(options["owners"], 1))]

        created = 0
        vins_lote = set()
        plates_lote = set()

        for _ in range(target):
            brand, models = random.choice(BRANDS)

            vin = unique_vin()
            # Evita colisão tanto no banco quanto no lote atual
            while vin in vins_lote or Vehicle.objects.filter(vin=vin).exists():
                vin = unique_vin()
            vins_lote.add(vin)

            plate = unique_plate()
            while plate in plates_lote or Vehicle.objects.filter(license_plate=plate).exists():
                plate = unique_plate()
            plates_lote.add(plate)

            Vehicle.objects.create(
                brand=brand,
                model=random.choice(models),
                year=random.randint(2005, 2025),
                color=random.choice(COLORS),
                mileage_km=random.randint(0, 200_000),
                license_plate=plate,
                vin=vin,
                owner=random.choice(owners),
            )
            created += 1

        self.stdout.write(self.style.SUCCESS(f"Proprietários criados: {len(owners)}"))
        self.stdout.write(self.style.SUCCESS(f"Veículos criados: {created}"))
