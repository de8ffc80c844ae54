from datetime import datetime, timezone as dt_timezone

from django.test import SimpleTestCase

from accounts.models import User
from transfers.exceptions import InvalidTransition, TransferFinalized, TransferValidationError, Unauthorized
from transfers.models import ACTIVE_STATUSES, TERMINAL_STATUSES, DocumentType, Transfer, TransferStatus
from transfers.state_machine import (
    CANCELLED_BY_ADMIN,
    CANCELLED_BY_SELLER,
    TransferAction,
    allowed_actions,
    apply_transition,
    can_upload_document,
    transfer_permissions,
)


class StateMachineTests(SimpleTestCase):
    """
    Testes da máquina de estados pura (nenhum acesso ao banco).

    Os atores são instâncias não salvas com `pk` fixo: vendedor=1,
    comprador=2, administrador=3 e um terceiro proprietário=4.
    """

    def setUp(self):
        self.seller = User(pk=1, username="vendedor", role=User.Role.OWNER)
        self.buyer = User(pk=2, username="comprador", role=User.Role.OWNER)
        self.admin = User(pk=3, username="admin", role=User.Role.ADMIN)
        self.stranger = User(pk=4, username="outro", role=User.Role.OWNER)
        self.at = datetime(2024, 5, 1, 12, 0, tzinfo=dt_timezone.utc)

    def _transfer(self, status):
        return Transfer(pk=10, seller_id=1, buyer_id=2, status=status)

    # --------------------------------------------------------------------------
    # Caminho feliz
    # --------------------------------------------------------------------------

    def test_buyer_accept(self):
        t = self._transfer(TransferStatus.PENDING_BUYER_ACCEPTANCE)
        changes = apply_transition(t, TransferAction.BUYER_ACCEPT, self.buyer)
        self.assertEqual(changes, {"status": TransferStatus.PENDING_ADMIN_APPROVAL})

    def test_admin_approve_sets_completion_fields(self):
        t = self._transfer(TransferStatus.PENDING_ADMIN_APPROVAL)
        changes = apply_transition(t, TransferAction.ADMIN_APPROVE, self.admin, notes="ok", at=self.at)
        self.assertEqual(changes["status"], TransferStatus.COMPLETED)
        self.assertEqual(changes["completion_date"], self.at)
        self.assertEqual(changes["approved_by_admin"], self.admin)
        self.assertEqual(changes["admin_notes"], "ok")

    def test_admin_approve_without_notes_keeps_existing_notes(self):
        t = self._transfer(TransferStatus.PENDING_ADMIN_APPROVAL)
        changes = apply_transition(t, TransferAction.ADMIN_APPROVE, self.admin)
        self.assertNotIn("admin_notes", changes)

    def test_admin_reject_stamps_attribution(self):
        t = self._transfer(TransferStatus.PENDING_ADMIN_APPROVAL)
        changes = apply_transition(t, TransferAction.ADMIN_REJECT, self.admin, notes="Documentos ilegíveis", at=self.at)
        self.assertEqual(changes["status"], TransferStatus.REJECTED)
        self.assertEqual(changes["admin_notes"], "Documentos ilegíveis")
        self.assertEqual(changes["rejected_at"], self.at)
        self.assertEqual(changes["rejected_by"], self.admin)

    def test_admin_reject_without_reason_keeps_existing_notes(self):
        t = self._transfer(TransferStatus.PENDING_ADMIN_APPROVAL)
        changes = apply_transition(t, TransferAction.ADMIN_REJECT, self.admin, notes="   ")
        self.assertEqual(changes["status"], TransferStatus.REJECTED)
        self.assertNotIn("admin_notes", changes)

    def test_cancel_by_seller_uses_default_reason(self):
        t = self._transfer(TransferStatus.PENDING_BUYER_ACCEPTANCE)
        changes = apply_transition(t, TransferAction.CANCEL, self.seller, at=self.at)
        self.assertEqual(changes["status"], TransferStatus.CANCELLED)
        self.assertEqual(changes["cancelled_by"], self.seller)
        self.assertEqual(changes["cancelled_at"], self.at)
        self.assertEqual(changes["admin_notes"], CANCELLED_BY_SELLER)

    def test_cancel_by_admin_uses_admin_reason(self):
        t = self._transfer(TransferStatus.PENDING_ADMIN_APPROVAL)
        changes = apply_transition(t, TransferAction.CANCEL, self.admin)
        self.assertEqual(changes["admin_notes"], CANCELLED_BY_ADMIN)

    def test_cancel_keeps_given_reason(self):
        t = self._transfer(TransferStatus.PENDING_BUYER_ACCEPTANCE)
        changes = apply_transition(t, TransferAction.CANCEL, self.seller, notes="  Desisti da venda  ")
        self.assertEqual(changes["admin_notes"], "Desisti da venda")

    def test_cancel_allowed_from_every_active_status(self):
        for status in ACTIVE_STATUSES:
            with self.subTest(status=status):
                changes = apply_transition(self._transfer(status), TransferAction.CANCEL, self.seller)
                self.assertEqual(changes["status"], TransferStatus.CANCELLED)

    # --------------------------------------------------------------------------
    # Recusas
    # --------------------------------------------------------------------------

    def test_unknown_action(self):
        with self.assertRaises(TransferValidationError):
            apply_transition(self._transfer(TransferStatus.PENDING_BUYER_ACCEPTANCE), "approve_all", self.admin)

    def test_terminal_status_is_finalized_for_every_action(self):
        """
        Estado final vence qualquer outra verificação, inclusive a de papel.
        """
        for status in TERMINAL_STATUSES:
            for action in TransferAction.ALL:
                for actor in (self.seller, self.buyer, self.admin, self.stranger):
                    with self.subTest(status=status, action=action, actor=actor.username):
                        with self.assertRaises(TransferFinalized):
                            apply_transition(self._transfer(status), action, actor)

    def test_finalized_is_an_invalid_transition(self):
        with self.assertRaises(InvalidTransition):
            apply_transition(self._transfer(TransferStatus.COMPLETED), TransferAction.ADMIN_REJECT, self.admin)

    def test_buyer_accept_by_anyone_else_is_unauthorized(self):
        t = self._transfer(TransferStatus.PENDING_BUYER_ACCEPTANCE)
        for actor in (self.seller, self.admin, self.stranger, None):
            with self.subTest(actor=actor):
                with self.assertRaises(Unauthorized):
                    apply_transition(t, TransferAction.BUYER_ACCEPT, actor)

    def test_admin_actions_by_non_admin_are_unauthorized(self):
        t = self._transfer(TransferStatus.PENDING_ADMIN_APPROVAL)
        for action in (TransferAction.ADMIN_APPROVE, TransferAction.ADMIN_REJECT):
            for actor in (self.seller, self.buyer, self.stranger):
                with self.subTest(action=action, actor=actor.username):
                    with self.assertRaises(Unauthorized):
                        apply_transition(t, action, actor)

    def test_superuser_counts_as_admin(self):
        root = User(pk=9, username="root", role=User.Role.OWNER, is_superuser=True)
        t = self._transfer(TransferStatus.PENDING_ADMIN_APPROVAL)
        self.assertEqual(apply_transition(t, TransferAction.ADMIN_APPROVE, root)["status"], TransferStatus.COMPLETED)

    def test_cancel_by_buyer_or_stranger_is_unauthorized(self):
        t = self._transfer(TransferStatus.PENDING_BUYER_ACCEPTANCE)
        for actor in (self.buyer, self.stranger):
            with self.subTest(actor=actor.username):
                with self.assertRaises(Unauthorized):
                    apply_transition(t, TransferAction.CANCEL, actor)

    def test_role_checked_before_source_status(self):
        """
        Comprador tentando aprovar num estado errado recebe Unauthorized, não
        InvalidTransition.
        """
        t = self._transfer(TransferStatus.PENDING_BUYER_ACCEPTANCE)
        with self.assertRaises(Unauthorized):
            apply_transition(t, TransferAction.ADMIN_APPROVE, self.buyer)

    def test_approve_before_buyer_acceptance_is_invalid(self):
        t = self._transfer(TransferStatus.PENDING_BUYER_ACCEPTANCE)
        with self.assertRaises(InvalidTransition) as ctx:
            apply_transition(t, TransferAction.ADMIN_APPROVE, self.admin)
        self.assertNotIsInstance(ctx.exception, TransferFinalized)

    def test_reject_only_from_pending_admin_approval(self):
        for status in (TransferStatus.PENDING_BUYER_ACCEPTANCE, TransferStatus.PENDING_SELLER_DOCUMENTS):
            with self.subTest(status=status):
                with self.assertRaises(InvalidTransition):
                    apply_transition(self._transfer(status), TransferAction.ADMIN_REJECT, self.admin)

    def test_buyer_accept_twice_is_invalid(self):
        t = self._transfer(TransferStatus.PENDING_ADMIN_APPROVAL)
        with self.assertRaises(InvalidTransition):
            apply_transition(t, TransferAction.BUYER_ACCEPT, self.buyer)

    def test_transfer_is_not_mutated(self):
        t = self._transfer(TransferStatus.PENDING_ADMIN_APPROVAL)
        apply_transition(t, TransferAction.ADMIN_APPROVE, self.admin)
        self.assertEqual(t.status, TransferStatus.PENDING_ADMIN_APPROVAL)
        self.assertIsNone(t.completion_date)

    # --------------------------------------------------------------------------
    # Permissões derivadas
    # --------------------------------------------------------------------------

    def test_allowed_actions(self):
        t = self._transfer(TransferStatus.PENDING_ADMIN_APPROVAL)
        self.assertEqual(
            allowed_actions(t, self.admin),
            [TransferAction.ADMIN_APPROVE, TransferAction.ADMIN_REJECT, TransferAction.CANCEL],
        )
        self.assertEqual(allowed_actions(t, self.seller), [TransferAction.CANCEL])
        self.assertEqual(allowed_actions(t, self.buyer), [])
        self.assertEqual(allowed_actions(self._transfer(TransferStatus.COMPLETED), self.admin), [])

    def test_document_upload_rules(self):
        t = self._transfer(TransferStatus.PENDING_BUYER_ACCEPTANCE)
        self.assertTrue(can_upload_document(t, DocumentType.SELLER_ID, self.seller))
        self.assertFalse(can_upload_document(t, DocumentType.SELLER_ID, self.buyer))
        self.assertTrue(can_upload_document(t, DocumentType.BUYER_ID, self.buyer))
        self.assertFalse(can_upload_document(t, DocumentType.BUYER_ID, self.admin))
        self.assertTrue(can_upload_document(t, DocumentType.SALE_CONTRACT, self.buyer))
        self.assertTrue(can_upload_document(t, DocumentType.OTHER, self.admin))
        self.assertFalse(can_upload_document(t, DocumentType.OTHER, self.stranger))
        self.assertFalse(can_upload_document(t, "passaporte", self.seller))

    def test_no_upload_on_terminal_transfer(self):
        t = self._transfer(TransferStatus.CANCELLED)
        self.assertFalse(can_upload_document(t, DocumentType.SELLER_ID, self.seller))

    def test_transfer_permissions_for_buyer(self):
        perms = transfer_permissions(self._transfer(TransferStatus.PENDING_BUYER_ACCEPTANCE), self.buyer)
        self.assertTrue(perms["can_view"])
        self.assertTrue(perms["can_accept"])
        self.assertFalse(perms["can_approve"])
        self.assertFalse(perms["can_cancel"])
        self.assertTrue(perms["is_buyer"])
        self.assertFalse(perms["is_seller"])
        self.assertEqual(
            perms["can_upload"],
            {"seller_id": False, "buyer_id": True, "sale_contract": True, "other": True},
        )

    def test_transfer_permissions_for_stranger(self):
        perms = transfer_permissions(self._transfer(TransferStatus.PENDING_BUYER_ACCEPTANCE), self.stranger)
        self.assertFalse(perms["can_view"])
        self.assertFalse(any(perms["can_upload"].values()))
