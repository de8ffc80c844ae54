# transfers/exceptions.py
"""
Taxonomia de erros do fluxo de traspasso.

Cada erro carrega um código estável (`code`), uma mensagem legível e o status
HTTP correspondente. As views convertem qualquer `TransferError` em
`{"error": ..., "error_code": ...}` sem precisar conhecer a subclasse.
"""


class TransferError(Exception):
    code = "TRANSFER_ERROR"
    status_code = 400
    default_message = "Erro no processo de traspasso."

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def as_dict(self):
        return {"error": self.message, "error_code": self.code}


class Unauthenticated(TransferError):
    code = "UNAUTHENTICATED"
    status_code = 401
    default_message = "Não autenticado."


class Unauthorized(TransferError):
    code = "UNAUTHORIZED"
    status_code = 403
    default_message = "Não autorizado."


class NotFound(TransferError):
    code = "NOT_FOUND"
    status_code = 404
    default_message = "Registro não encontrado."


class InvalidTransition(TransferError):
    code = "INVALID_TRANSITION"
    status_code = 409
    default_message = "Ação não permitida no estado atual do traspasso."


class TransferFinalized(InvalidTransition):
    code = "TRANSFER_FINALIZED"
    default_message = "Não é possível modificar um traspasso finalizado."


class ProfileIncomplete(TransferError):
    code = "PROFILE_INCOMPLETE"
    status_code = 400
    default_message = "O perfil (documento de identidade e cidade) está incompleto."


class DuplicateActiveTransfer(TransferError):
    code = "DUPLICATE_ACTIVE_TRANSFER"
    status_code = 409
    default_message = "Já existe um processo de traspasso ativo para este veículo."


class TransferValidationError(TransferError):
    code = "VALIDATION_ERROR"
    status_code = 400
    default_message = "Dados inválidos."


class StorageFailure(TransferError):
    code = "STORAGE_FAILURE"
    status_code = 503
    default_message = "Falha ao gravar os dados. Tente novamente."
