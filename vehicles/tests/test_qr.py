import json
from django.test import SimpleTestCase
from vehicles.qr import extract_vehicle_fragment, generate_qr_token, is_valid_qr_token, parse_qr_token


class QRTokenTests(SimpleTestCase):
    """
    Testes do utilitário de tokens QR (sem banco de dados).
    """

    def test_generate_token_format(self):
        token = generate_qr_token(42, "9BWZZZ377VT004251")
        prefix, vehicle_part, digest = token.split("_")
        self.assertEqual(prefix, "CAR")
        self.assertEqual(vehicle_part, "00000042")
        self.assertEqual(len(digest), 16)
        self.assertEqual(digest, digest.upper())

    def test_is_valid_qr_token(self):
        self.assertTrue(is_valid_qr_token("CAR_00000042_ABCDEF0123456789"))
        self.assertFalse(is_valid_qr_token("XYZ_00000042"))
        self.assertFalse(is_valid_qr_token("CAR_1"))
        self.assertFalse(is_valid_qr_token(None))
        self.assertFalse(is_valid_qr_token(123))

    def test_extract_vehicle_fragment(self):
        self.assertEqual(extract_vehicle_fragment("CAR_00000042_ABCDEF0123456789"), "00000042")
        self.assertIsNone(extract_vehicle_fragment("qualquer coisa"))

    def test_parse_token(self):
        parsed = parse_qr_token("CAR_00000042_ABCDEF0123456789")
        self.assertEqual(parsed, {"type": "CAR_ID", "vehicle_id": 42, "vin": ""})

    def test_parse_legacy_json(self):
        """
        O formato antigo em JSON continua aceito.
        """
        payload = json.dumps({"type": "CAR_ID", "carId": "7", "vin": "VIN7"})
        self.assertEqual(parse_qr_token(payload), {"type": "CAR_ID", "vehicle_id": 7, "vin": "VIN7"})

    def test_parse_invalid(self):
        for value in ("", "lixo", "CAR_ABC_123", json.dumps({"type": "OUTRO", "carId": "1", "vin": "x"})):
            with self.subTest(value=value):
                with self.assertRaises(ValueError):
                    parse_qr_token(value)
