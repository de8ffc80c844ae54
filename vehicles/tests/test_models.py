from django.test import TestCase
from django.db import IntegrityError
from accounts.models import User
from vehicles.models import Vehicle
from vehicles.qr import is_valid_qr_token


class VehicleModelTests(TestCase):
    """
    Testes unitários para o modelo Vehicle.

    Objetivo:
    - Garantir que o comportamento do modelo (campos, constraints e ordenação)
      está funcionando corretamente.
    - Cobrir casos básicos como __str__, valores padrão, unicidade do VIN e da
      placa, e a geração do código QR.
    """

    def setUp(self):
        """
        Configuração inicial executada antes de cada teste.

        Aqui criamos um proprietário e um veículo base (Toyota Corolla 2021).
        """
        self.owner = User.objects.create_user(username="dono", email="dono@carid.test", password="x")
        self.v1 = Vehicle.objects.create(
            brand="Toyota",
            model="Corolla",
            year=2021,
            color="Prata",
            mileage_km=30000,
            license_plate="ABC123",
            vin="9BWZZZ377VT004251",
            owner=self.owner,
        )

    def test_str_representation(self):
        """
        O método __str__ deve retornar "<marca> <modelo> <ano>".
        """
        self.assertEqual(str(self.v1), "Toyota Corolla 2021")

    def test_mileage_default(self):
        """
        Sem quilometragem informada, o campo assume 0.
        """
        v = Vehicle.objects.create(
            brand="Renault",
            model="Logan",
            year=2018,
            color="Branco",
            license_plate="DEF456",
            vin="9BWZZZ377VT004252",
            owner=self.owner,
        )
        self.assertEqual(v.mileage_km, 0)

    def test_created_at_ordering_desc(self):
        """
        Meta.ordering = ["-created_at"]: o mais recente vem primeiro.
        """
        v2 = Vehicle.objects.create(
            brand="Mazda",
            model="CX-30",
            year=2022,
            color="Preto",
            license_plate="GHI789",
            vin="9BWZZZ377VT004253",
            owner=self.owner,
        )

        first = Vehicle.objects.all().first()  # Deve ser o último inserido
        self.assertEqual(first.id, v2.id)

    def test_vin_unique_constraint(self):
        """
        O VIN (chassi) deve ser único no banco de dados.
        """
        with self.assertRaises(IntegrityError):
            Vehicle.objects.create(
                brand="Toyota",
                model="Corolla",
                year=2020,
                color="Prata",
                license_plate="JKL012",
                vin="9BWZZZ377VT004251",  # VIN duplicado do setUp()
                owner=self.owner,
            )

    def test_license_plate_unique_constraint(self):
        with self.assertRaises(IntegrityError):
            Vehicle.objects.create(
                brand="Kia",
                model="Rio",
                year=2020,
                color="Azul",
                license_plate="ABC123",  # placa duplicada do setUp()
                vin="9BWZZZ377VT009999",
                owner=self.owner,
            )

    def test_qr_code_generated_after_save(self):
        """
        O token QR é gerado no primeiro save, usa o id do veículo e fica
        gravado no banco.
        """
        self.assertTrue(is_valid_qr_token(self.v1.qr_code))
        self.assertTrue(self.v1.qr_code.startswith(f"CAR_{self.v1.pk:08d}_"))
        self.v1.refresh_from_db()
        self.assertTrue(is_valid_qr_token(self.v1.qr_code))

    def test_qr_code_not_regenerated_on_update(self):
        token = self.v1.qr_code
        self.v1.mileage_km = 31000
        self.v1.save()
        self.v1.refresh_from_db()
        self.assertEqual(self.v1.qr_code, token)
