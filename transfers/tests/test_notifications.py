from unittest.mock import patch

from django.core import mail
from django.test import TestCase, override_settings

from transfers import notifications
from transfers.models import TransferStatus

from .helpers import make_transfer, make_user, make_vehicle


@override_settings(CARID_SITE_URL="https://carid.example/", DEFAULT_FROM_EMAIL="CarID <noreply@carid.example>")
class NotificationTests(TestCase):
    """
    Templates e regras de destinatário das notificações por e-mail.
    """

    def setUp(self):
        self.seller = make_user("vendedor")
        self.buyer = make_user("comprador")
        self.vehicle = make_vehicle(self.seller)
        self.transfer = make_transfer(self.vehicle, self.seller, self.buyer)

    def test_render_rejected_with_reason(self):
        message = notifications.render("transfer_rejected", {"name": "Ana", "reason": "Placa divergente"})
        self.assertEqual(message["subject"], "Traspasso rejeitado")
        self.assertIn("Olá Ana", message["body"])
        self.assertIn("Motivo: Placa divergente", message["body"])

    def test_render_rejected_without_reason(self):
        message = notifications.render("transfer_rejected", {"name": "Ana"})
        self.assertNotIn("Motivo", message["body"])

    def test_notify_sends_mail(self):
        ok = notifications.notify("alguem@carid.test", "transfer_update", {
            "name": "Ana", "status_label": "Cancelado", "url": "https://carid.example/transfers/1/",
        })
        self.assertTrue(ok)
        self.assertEqual(len(mail.outbox), 1)
        self.assertEqual(mail.outbox[0].subject, "Atualização de traspasso - Cancelado")
        self.assertEqual(mail.outbox[0].from_email, "CarID <noreply@carid.example>")

    def test_notify_swallows_failures(self):
        with patch("transfers.notifications.send_mail", side_effect=ConnectionRefusedError()):
            with self.assertLogs("transfers.notifications", level="ERROR"):
                ok = notifications.notify("alguem@carid.test", "transfer_approved", {"name": "Ana", "url": "x"})
        self.assertFalse(ok)

    def test_initiated_goes_to_buyer_with_link(self):
        notifications.notify_initiated(self.transfer)
        self.assertEqual(len(mail.outbox), 1)
        self.assertEqual(mail.outbox[0].to, [self.buyer.email])
        self.assertIn(f"https://carid.example/transfers/{self.transfer.pk}/", mail.outbox[0].body)
        self.assertIn(str(self.vehicle), mail.outbox[0].body)

    def test_completed_notifies_both_parties(self):
        self.transfer.status = TransferStatus.COMPLETED
        notifications.notify_transition(self.transfer)
        self.assertEqual([m.to for m in mail.outbox], [[self.seller.email], [self.buyer.email]])

    def test_cancelled_notifies_seller(self):
        self.transfer.status = TransferStatus.CANCELLED
        notifications.notify_transition(self.transfer)
        self.assertEqual([m.to for m in mail.outbox], [[self.seller.email]])
        self.assertIn("Cancelado", mail.outbox[0].subject)

    def test_acceptance_sends_nothing(self):
        self.transfer.status = TransferStatus.PENDING_ADMIN_APPROVAL
        notifications.notify_transition(self.transfer)
        self.assertEqual(len(mail.outbox), 0)
